"""Streamlit renderers for the home page and dashboard sections."""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from analytics import AggregateSnapshot
from metric_guide import metric_guide
from models import Transaction


def _fmt_amount(value: float) -> str:
    if value < 0:
        return f"-{abs(value):,.2f}"
    return f"{value:,.2f}"


def render_overview(totals: dict[str, float], labels: dict[str, str]) -> None:
    c1, c2, c3 = st.columns(3)
    c1.metric(labels["balance"], _fmt_amount(totals["balance"]))
    c2.metric(labels["income"], _fmt_amount(totals["income"]))
    c3.metric(labels["expense"], _fmt_amount(totals["expense"]))


def render_recent(recent: pd.DataFrame) -> None:
    st.markdown("### Recent transactions")
    if recent.empty:
        st.info("No transactions yet.")
        return
    table = recent[["Date", "Description", "Category", "Amount"]].copy()
    table["Date"] = table["Date"].dt.strftime("%Y-%m-%d")
    st.dataframe(table, use_container_width=True, hide_index=True)


def render_spending_by_category(breakdown: pd.DataFrame) -> None:
    st.markdown("### Spending by category")
    if breakdown.empty:
        st.info("No expense data to display.")
        return
    st.bar_chart(breakdown.set_index("Category")[["Amount"]])
    table = breakdown.copy()
    table["Percentage"] = table["Percentage"].map(lambda v: f"{v:.1f}%")
    st.dataframe(table, use_container_width=True, hide_index=True)


def render_balance_trend(trend: pd.DataFrame | None) -> None:
    st.markdown("### Balance trend")
    if trend is None:
        st.info("Not enough data for a trend line.")
        return
    st.line_chart(trend, x="Date", y="Balance")


def render_monthly_profit_loss(monthly: pd.DataFrame, labels: dict[str, str]) -> None:
    st.markdown("### Monthly profit / loss")
    if monthly.empty:
        st.info("No monthly data to display.")
        return
    chart = monthly.rename(columns={"Income": labels["income"], "Expense": labels["expense"]})
    st.bar_chart(chart[[labels["income"], labels["expense"]]])
    st.bar_chart(monthly[["Net"]])


def render_dashboard(snapshot: AggregateSnapshot, labels: dict[str, str]) -> None:
    render_overview(snapshot.totals, labels)

    left, right = st.columns(2)
    with left:
        render_recent(snapshot.recent)
    with right:
        render_spending_by_category(snapshot.category_breakdown)

    left, right = st.columns(2)
    with left:
        render_balance_trend(snapshot.balance_trend)
    with right:
        render_monthly_profit_loss(snapshot.monthly_profit_loss, labels)


def render_transaction_list(transactions: Sequence[Transaction], key_prefix: str) -> int | None:
    """List transactions with a remove button each; return the id whose button was pressed."""
    removed: int | None = None
    for tx in transactions:
        cols = st.columns([3, 2, 2, 1])
        cols[0].write(f"**{tx.description}**  \n{tx.category}")
        cols[1].write(tx.date.isoformat())
        cols[2].write(_fmt_amount(tx.amount))
        if cols[3].button("Remove", key=f"{key_prefix}_{tx.id}"):
            removed = tx.id
    return removed


def render_raw_preview(preview: pd.DataFrame, upload_info: str) -> None:
    st.success(upload_info)
    st.dataframe(preview.head(20), use_container_width=True, hide_index=True)


def render_metric_guide(domain: str) -> None:
    st.markdown("### Metric guide")
    st.dataframe(pd.DataFrame(metric_guide(domain)), use_container_width=True, hide_index=True)
