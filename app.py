"""LedgerLens Streamlit entrypoint."""

from __future__ import annotations

import functools

import streamlit as st

from ai_assistant import AdvisoryError, ask_advisor
from analytics import build_aggregate_snapshot
from dashboard_views import (
    render_dashboard,
    render_metric_guide,
    render_raw_preview,
    render_transaction_list,
)
from logging_setup import configure_logging, get_logger
from models import (
    BUSINESS,
    DOMAIN_HINTS,
    EXPENSE,
    INCOME,
    MANUAL_CATEGORIES,
    TransactionValidationError,
    build_manual_transaction,
    domain_labels,
)
from parsing import ParseError, parse_csv_text, parse_uploaded_csv, raw_rows_frame
from reconciliation import ReconciliationError, reconcile_rows
from session_state import (
    DASHBOARD,
    SessionState,
    add_manual_transaction,
    load_dashboard,
    open_sample_dashboard,
    remove_manual_transaction,
    remove_transaction,
    reset,
    set_domain,
    stage_rows,
)
from settings import Settings, load_settings

st.set_page_config(page_title="LedgerLens", page_icon="\U0001f4ca", layout="wide")

logger = get_logger("ledgerlens.app")

STATE_KEY = "ledger_state"


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        .hero {
            margin-bottom: 0.6rem;
            padding: 1rem 1.2rem;
            border: 1px solid rgba(30, 80, 145, 0.23);
            border-radius: 12px;
            background: rgba(255,255,255,0.85);
        }
        .hero h1 { margin: 0; }
        .hero p { margin: 0.35rem 0 0 0; color: #244674; }
        [data-testid="stMetric"] {
            background: rgba(255,255,255,0.90);
            border: 1px solid rgba(45, 88, 162, 0.25);
            border-radius: 12px;
            padding: 0.45rem 0.6rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _render_header() -> None:
    st.markdown(
        """
        <div class="hero">
          <h1>LedgerLens</h1>
          <p>Add transactions by hand, paste them, or upload a CSV. The dashboard does the rest.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _get_state() -> SessionState:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = SessionState()
    return st.session_state[STATE_KEY]


def _set_state(state: SessionState) -> None:
    st.session_state[STATE_KEY] = state


def _sidebar_settings(settings: Settings, state: SessionState) -> Settings:
    st.sidebar.header("Setup")
    domain = st.sidebar.radio(
        "Dashboard type",
        list(DOMAIN_HINTS),
        index=list(DOMAIN_HINTS).index(state.domain),
        format_func=str.capitalize,
    )
    if domain != state.domain:
        _set_state(set_domain(state, domain))

    with st.sidebar.expander("AI settings", expanded=not settings.ai_enabled):
        api_key = st.text_input("OpenAI API key", value=settings.openai_api_key, type="password")
        model = st.text_input("Model", value=settings.openai_model)
    return Settings(
        openai_api_key=api_key.strip(),
        openai_model=model.strip() or settings.openai_model,
        temperature=settings.temperature,
        log_level=settings.log_level,
    )


def _upload_section(state: SessionState) -> None:
    st.markdown("### Upload a CSV")
    uploaded = st.file_uploader(
        "Drop your CSV file here",
        type=["csv"],
        key=f"csv_upload_{state.upload_generation}",
    )
    if uploaded is None:
        return
    marker = (uploaded.name, uploaded.size)
    if st.session_state.get("processed_upload") == marker:
        return
    st.session_state["processed_upload"] = marker
    try:
        rows = parse_uploaded_csv(uploaded)
    except ParseError as exc:
        st.error(f"Failed to parse CSV: {exc}")
        return
    _set_state(stage_rows(state, rows, uploaded.name))
    st.rerun()


def _paste_section(state: SessionState) -> None:
    st.markdown("### Or paste data")
    with st.form(key="paste_form", clear_on_submit=True):
        pasted = st.text_area("Paste transaction data", placeholder="Date,Details,Amount\n2024-07-25,Groceries,-55.20")
        submit = st.form_submit_button("Process pasted data")
    if not submit:
        return
    if not pasted.strip():
        st.warning("Please paste some data first.")
        return
    try:
        rows = parse_csv_text(pasted)
    except ParseError as exc:
        st.error(f"Failed to parse CSV: {exc}")
        return
    _set_state(stage_rows(state, rows, "pasted data"))
    st.rerun()


def _manual_section(state: SessionState) -> None:
    st.markdown("### Add a transaction")
    with st.form(key="manual_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        description = c1.text_input("Description")
        amount = c2.text_input("Amount", placeholder="0.00")
        category = c1.selectbox("Category", MANUAL_CATEGORIES)
        direction = c2.selectbox("Type", [EXPENSE, INCOME], format_func=str.capitalize)
        submit = st.form_submit_button("Add transaction")
    if submit:
        try:
            tx = build_manual_transaction(description, amount, category, direction)
        except TransactionValidationError as exc:
            st.warning(f"Please fill all fields with valid data. {exc}")
        else:
            _set_state(add_manual_transaction(state, tx))
            st.rerun()

    if state.manual_transactions:
        removed = render_transaction_list(state.manual_transactions, key_prefix="manual")
        if removed is not None:
            _set_state(remove_manual_transaction(state, removed))
            st.rerun()


def _render_home(state: SessionState, settings: Settings) -> None:
    _upload_section(state)
    _paste_section(state)
    state = _get_state()
    if state.pending_rows:
        render_raw_preview(raw_rows_frame(list(state.pending_rows)), state.upload_info)

    _manual_section(state)
    state = _get_state()

    st.divider()
    if st.button("Create dashboard", type="primary"):
        if not state.has_input:
            st.session_state["offer_sample"] = True
        else:
            reconcile = functools.partial(
                reconcile_rows,
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                temperature=settings.temperature,
            )
            try:
                with st.spinner("Processing your data with AI..."):
                    _set_state(load_dashboard(state, reconcile))
            except ReconciliationError as exc:
                st.error(str(exc))
                return
            logger.info("Dashboard opened with %d transactions", len(_get_state().transactions))
            st.rerun()

    if st.session_state.get("offer_sample"):
        st.info("You haven't entered any transactions. Would you like to view the dashboard with sample data?")
        if st.button("Use sample data"):
            st.session_state["offer_sample"] = False
            _set_state(open_sample_dashboard(state))
            st.rerun()


def _render_advisor(state: SessionState, settings: Settings) -> None:
    st.markdown("### AI financial advisor")
    st.caption('Ask anything, e.g. "Where did I spend the most money?"')
    disabled = not state.transactions
    with st.form(key="advisor_form"):
        question = st.text_input("Financial question", disabled=disabled)
        submit = st.form_submit_button("Get insights", disabled=disabled)
    if submit and question.strip():
        try:
            with st.spinner("Analyzing..."):
                st.session_state["advisor_answer"] = ask_advisor(
                    state.transactions,
                    question,
                    state.domain,
                    api_key=settings.openai_api_key,
                    model=settings.openai_model,
                    temperature=settings.temperature,
                )
        except AdvisoryError as exc:
            st.error(str(exc))
    answer = st.session_state.get("advisor_answer", "")
    if answer:
        st.markdown(answer)


def _render_dashboard_page(state: SessionState, settings: Settings) -> None:
    labels = domain_labels(state.domain)
    st.header("Business Dashboard" if state.domain == BUSINESS else "Finance Dashboard")

    render_dashboard(build_aggregate_snapshot(state.transactions), labels)
    _render_advisor(state, settings)

    with st.expander("Manage transactions", expanded=False):
        removed = render_transaction_list(state.transactions, key_prefix="dashboard")
        if removed is not None:
            _set_state(remove_transaction(state, removed))
            st.rerun()

    with st.expander("Metric guide", expanded=False):
        render_metric_guide(state.domain)

    if st.sidebar.button("Start over"):
        st.session_state.pop("advisor_answer", None)
        st.session_state.pop("processed_upload", None)
        _set_state(reset(state))
        st.rerun()


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    _inject_styles()
    _render_header()

    settings = _sidebar_settings(settings, _get_state())
    state = _get_state()
    if state.view == DASHBOARD:
        _render_dashboard_page(state, settings)
    else:
        _render_home(state, settings)


if __name__ == "__main__":
    main()
