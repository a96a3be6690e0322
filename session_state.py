"""Immutable session state and the pure transitions the Streamlit shell applies to it.

The shell keeps one ``SessionState`` in ``st.session_state`` and replaces it on
every event. Transitions never mutate their input, so a failed reconciliation
leaves the previous state in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Sequence

from models import PERSONAL, Transaction, normalize_domain, sample_transactions
from parsing import RawRow

HOME = "home"
DASHBOARD = "dashboard"

Reconciler = Callable[[Sequence[RawRow], str], Sequence[Transaction]]


@dataclass(frozen=True)
class SessionState:
    view: str = HOME
    domain: str = PERSONAL
    manual_transactions: tuple[Transaction, ...] = ()
    pending_rows: tuple[RawRow, ...] = ()
    upload_info: str = ""
    transactions: tuple[Transaction, ...] = ()
    upload_generation: int = 0

    @property
    def has_input(self) -> bool:
        return bool(self.manual_transactions or self.pending_rows)


def set_domain(state: SessionState, domain: str) -> SessionState:
    return replace(state, domain=normalize_domain(domain))


def add_manual_transaction(state: SessionState, transaction: Transaction) -> SessionState:
    """Newest manual entry goes first."""
    return replace(state, manual_transactions=(transaction, *state.manual_transactions))


def remove_manual_transaction(state: SessionState, transaction_id: int) -> SessionState:
    kept = tuple(tx for tx in state.manual_transactions if tx.id != transaction_id)
    return replace(state, manual_transactions=kept)


def stage_rows(state: SessionState, rows: Sequence[RawRow], source: str) -> SessionState:
    """Hold a parsed batch until the dashboard is opened. A new batch replaces the old one."""
    return replace(
        state,
        pending_rows=tuple(dict(row) for row in rows),
        upload_info=f"{len(rows)} rows loaded from {source}.",
    )


def open_dashboard(state: SessionState, reconciled: Sequence[Transaction] = ()) -> SessionState:
    """Show manual entries followed by reconciled rows and clear the staged batch."""
    return replace(
        state,
        view=DASHBOARD,
        transactions=(*state.manual_transactions, *reconciled),
        pending_rows=(),
        upload_info="",
    )


def load_dashboard(state: SessionState, reconcile: Reconciler) -> SessionState:
    """Reconcile the staged batch, if any, and open the dashboard.

    Errors from ``reconcile`` propagate and the caller keeps ``state`` as it was.
    """
    reconciled: Sequence[Transaction] = ()
    if state.pending_rows:
        reconciled = reconcile(state.pending_rows, state.domain)
    return open_dashboard(state, reconciled)


def open_sample_dashboard(state: SessionState) -> SessionState:
    return replace(state, view=DASHBOARD, transactions=tuple(sample_transactions()))


def remove_transaction(state: SessionState, transaction_id: int) -> SessionState:
    kept = tuple(tx for tx in state.transactions if tx.id != transaction_id)
    return replace(state, transactions=kept)


def reset(state: SessionState) -> SessionState:
    """Back to an empty home page, keeping the chosen domain.

    ``upload_generation`` is bumped so the shell mounts a fresh, empty file uploader.
    """
    return SessionState(domain=state.domain, upload_generation=state.upload_generation + 1)
