"""Map arbitrary spreadsheet columns onto canonical transactions via an LLM.

The model identifies the date, description, category and amount columns of an
unknown layout and returns a strictly typed array. The response is treated as
untrusted input: missing fields are defaulted, non-numeric amounts become zero,
and anything that is not an array of objects rejects the whole batch.
"""

from __future__ import annotations

import datetime
import json
import math
from typing import Any, Sequence

from openai import OpenAIError

from logging_setup import get_logger
from models import (
    BUSINESS,
    NO_DESCRIPTION,
    PERSONAL,
    UNCATEGORIZED,
    Transaction,
    new_transaction_id,
    normalize_domain,
)
from openai_client import complete_chat, create_client
from settings import DEFAULT_MODEL, DEFAULT_TEMPERATURE

RECONCILE_ROW_LIMIT = 100

logger = get_logger("ledgerlens.reconciliation")

TRANSACTION_ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "date": {"type": "string", "description": "Transaction date in YYYY-MM-DD format."},
        "description": {"type": "string", "description": "Description of the transaction."},
        "category": {"type": "string", "description": "Category of the transaction."},
        "amount": {
            "type": "number",
            "description": "Transaction amount. Negative for outflows, positive for inflows.",
        },
    },
    "required": ["date", "description", "category", "amount"],
    "additionalProperties": False,
}

RESPONSE_FORMAT: dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "reconciled_transactions",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {"transactions": {"type": "array", "items": TRANSACTION_ITEM_SCHEMA}},
            "required": ["transactions"],
            "additionalProperties": False,
        },
    },
}

SYSTEM_PROMPT = (
    "You are an intelligent data processor for financial data. "
    "You convert raw spreadsheet rows into a standardized list of transactions and return only JSON."
)

_SIGN_RULES = {
    PERSONAL: (
        "Income (salary, deposits, refunds, any money coming in) must be positive. "
        "Expenses (purchases, bills, withdrawals, any money going out) must be negative."
    ),
    BUSINESS: (
        "Revenue (sales, client payments, any money coming in) must be positive. "
        "Costs (supplier payments, payroll, rent, fees, any money going out) must be negative."
    ),
}


class ReconciliationError(RuntimeError):
    """The inference service failed or returned something other than an array of objects."""


def build_reconciliation_prompt(rows: Sequence[dict[str, str]], domain: str) -> str:
    """Build the column-mapping instructions for at most ``RECONCILE_ROW_LIMIT`` rows."""
    domain = normalize_domain(domain)
    batch = list(rows[:RECONCILE_ROW_LIMIT])
    framing = "business ledger" if domain == BUSINESS else "personal finance export"
    lines = [
        f"Analyze raw JSON rows taken from a user's {framing} and convert them into standardized transactions.",
        "Intelligently identify the columns for date, description, category and amount, even with varied names.",
        "",
        "Each transaction must have these keys:",
        '- "date": string in "YYYY-MM-DD" format.',
        '- "description": string.',
        f'- "category": string. Use "{UNCATEGORIZED}" if no category can be found.',
        '- "amount": number.',
        "",
        "Rules:",
        f"1. Sign: {_SIGN_RULES[domain]}",
        "2. Amount: handle a single amount column or separate debit/credit columns. Convert debits to negative.",
        "   Strip currency symbols and thousands separators.",
        "3. Date: find the date column and convert it to YYYY-MM-DD.",
        "4. Description: choose the most likely description column.",
        "",
        'Return ONLY a JSON object of the form {"transactions": [...]}.',
        "",
        f"Raw data ({len(batch)} rows):",
        json.dumps(batch, ensure_ascii=False),
    ]
    return "\n".join(lines)


def parse_reconciliation_payload(content: str) -> list[dict[str, Any]]:
    """Decode the service response into a list of objects or raise ``ReconciliationError``."""
    text = str(content or "").strip()
    if not text:
        raise ReconciliationError("The AI service returned an empty response.")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReconciliationError("The AI service returned data that is not valid JSON.") from exc

    if isinstance(payload, dict) and isinstance(payload.get("transactions"), list):
        payload = payload["transactions"]
    if not isinstance(payload, list):
        raise ReconciliationError(
            f"Expected an array of transactions, got {type(payload).__name__}."
        )
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ReconciliationError(f"Transaction #{idx} is {type(item).__name__}, expected an object.")
    return payload


def _coerce_amount(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        amount = float(value)
    except OverflowError:
        logger.debug("Replacing out-of-range amount with 0")
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def _coerce_date(value: Any, today: datetime.date) -> datetime.date:
    if not value:
        return today
    text = str(value).strip()[:10]
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        logger.debug("Replacing unparseable date %r with %s", value, today.isoformat())
        return today


def _coerce_text(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    text = str(value).strip()
    return text or fallback


def standardize_reconciled(
    items: Sequence[dict[str, Any]],
    today: datetime.date | None = None,
) -> list[Transaction]:
    """Turn validated service objects into transactions with fresh ids and defaults."""
    day = today or datetime.date.today()
    return [
        Transaction(
            id=new_transaction_id(),
            date=_coerce_date(item.get("date"), day),
            description=_coerce_text(item.get("description"), NO_DESCRIPTION),
            category=_coerce_text(item.get("category"), UNCATEGORIZED),
            amount=_coerce_amount(item.get("amount")),
        )
        for item in items
    ]


def reconcile_rows(
    rows: Sequence[dict[str, str]],
    domain: str,
    *,
    client: Any = None,
    api_key: str = "",
    model: str = DEFAULT_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    today: datetime.date | None = None,
) -> list[Transaction]:
    """Reconcile one parsed batch. Any failure raises and yields no transactions."""
    if not rows:
        return []

    prompt = build_reconciliation_prompt(rows, domain)
    if client is None:
        try:
            client = create_client(api_key)
        except ValueError as exc:
            raise ReconciliationError(str(exc)) from exc

    forwarded = min(len(rows), RECONCILE_ROW_LIMIT)
    logger.info("Reconciling %d of %d raw rows with model %s", forwarded, len(rows), model)
    try:
        content = complete_chat(
            client,
            model=model,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=prompt,
            temperature=temperature,
            response_format=RESPONSE_FORMAT,
        )
    except OpenAIError as exc:
        logger.warning("Reconciliation call failed: %s", exc)
        raise ReconciliationError(
            "The AI failed to understand the data structure. Please check the file format and try again."
        ) from exc

    try:
        items = parse_reconciliation_payload(content)
    except ReconciliationError as exc:
        logger.warning("Rejected reconciliation payload: %s", exc)
        raise

    transactions = standardize_reconciled(items, today=today)
    logger.info("Reconciled %d transactions", len(transactions))
    return transactions
