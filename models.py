"""Canonical transaction record, id generation and manual-entry validation."""

from __future__ import annotations

import datetime
import math
import threading
import time
from dataclasses import dataclass
from typing import Any

INCOME = "income"
EXPENSE = "expense"

PERSONAL = "personal"
BUSINESS = "business"
DOMAIN_HINTS = (PERSONAL, BUSINESS)

UNCATEGORIZED = "Uncategorized"
NO_DESCRIPTION = "No Description"

MANUAL_CATEGORIES = [
    "Food & Drink",
    "Groceries",
    "Transport",
    "Entertainment",
    "Shopping",
    "Housing",
    "Utilities",
    "Income",
]

DOMAIN_LABELS = {
    PERSONAL: {"income": "Income", "expense": "Expenses", "balance": "Total Balance"},
    BUSINESS: {"income": "Revenue", "expense": "Costs", "balance": "Profit"},
}


class TransactionValidationError(ValueError):
    """Manual entry rejected before a transaction is built."""


def kind_for_amount(amount: float) -> str:
    return INCOME if amount >= 0 else EXPENSE


def normalize_domain(domain: str) -> str:
    value = str(domain or "").strip().lower()
    if value not in DOMAIN_HINTS:
        raise ValueError(f"Unsupported domain hint: {domain!r}. Expected one of {DOMAIN_HINTS}.")
    return value


def domain_labels(domain: str) -> dict[str, str]:
    return dict(DOMAIN_LABELS[normalize_domain(domain)])


_ID_LOCK = threading.Lock()
_LAST_ID = 0


def new_transaction_id() -> int:
    """Return a millisecond-clock id, bumped past the previous one when the clock repeats."""
    global _LAST_ID
    with _ID_LOCK:
        candidate = time.time_ns() // 1_000_000
        if candidate <= _LAST_ID:
            candidate = _LAST_ID + 1
        _LAST_ID = candidate
        return candidate


@dataclass(frozen=True)
class Transaction:
    """A normalized transaction.

    ``amount`` is signed: positive for inflows, negative for outflows.
    ``kind`` is computed from the sign and cannot be set on its own.
    """

    id: int
    date: datetime.date
    description: str
    category: str
    amount: float

    @property
    def kind(self) -> str:
        return kind_for_amount(self.amount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "category": self.category,
            "amount": self.amount,
            "kind": self.kind,
        }


def build_manual_transaction(
    description: str,
    amount: Any,
    category: str,
    direction: str,
    today: datetime.date | None = None,
) -> Transaction:
    """Validate form input and return a transaction dated today.

    ``amount`` is the unsigned value typed by the user; ``direction`` picks the sign.
    """
    desc = str(description or "").strip()
    if not desc:
        raise TransactionValidationError("Description is required.")

    try:
        value = float(str(amount).strip())
    except (TypeError, ValueError):
        raise TransactionValidationError(f"Amount must be a number, got {amount!r}.") from None
    if not math.isfinite(value) or value <= 0:
        raise TransactionValidationError("Amount must be greater than zero.")

    cat = str(category or "").strip()
    if cat not in MANUAL_CATEGORIES:
        raise TransactionValidationError(f"Unknown category: {category!r}.")

    flow = str(direction or "").strip().lower()
    if flow not in (INCOME, EXPENSE):
        raise TransactionValidationError(f"Direction must be '{INCOME}' or '{EXPENSE}'.")

    return Transaction(
        id=new_transaction_id(),
        date=today or datetime.date.today(),
        description=desc,
        category=cat,
        amount=-value if flow == EXPENSE else value,
    )


_SAMPLE_ROWS = [
    ("2024-07-15", "Starbucks Coffee", "Food & Drink", -5.75),
    ("2024-07-16", "Paycheck Deposit", "Income", 2500.00),
    ("2024-07-17", "Netflix Subscription", "Entertainment", -15.49),
    ("2024-07-18", "Grocery Shopping", "Groceries", -85.30),
    ("2024-07-19", "Gasoline", "Transport", -45.00),
    ("2024-07-22", "Client Payment", "Income", 750.00),
]


def sample_transactions() -> list[Transaction]:
    """Demo data offered when the user opens the dashboard without any input."""
    return [
        Transaction(
            id=idx,
            date=datetime.date.fromisoformat(day),
            description=description,
            category=category,
            amount=amount,
        )
        for idx, (day, description, category, amount) in enumerate(_SAMPLE_ROWS, start=1)
    ]
