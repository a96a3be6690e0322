import datetime

import pandas as pd
import pytest

from analytics import (
    balance_trend,
    build_aggregate_snapshot,
    calculate_totals,
    category_breakdown,
    monthly_profit_loss,
    recent_transactions,
    transactions_to_frame,
)
from models import Transaction


def _tx(idx: int, day: str, amount: float, category: str = "Other", description: str = "") -> Transaction:
    return Transaction(
        id=idx,
        date=datetime.date.fromisoformat(day),
        description=description or f"tx-{idx}",
        category=category,
        amount=amount,
    )


def _sample() -> list[Transaction]:
    return [
        _tx(1, "2024-02-03", -30.0, "Groceries"),
        _tx(2, "2024-01-15", 50.0, "Income"),
        _tx(3, "2024-01-20", -20.0, "Transport"),
        _tx(4, "2024-02-01", 1000.0, "Income"),
        _tx(5, "2024-02-03", -50.0, "Transport"),
    ]


def test_transactions_to_frame_columns_and_types() -> None:
    df = transactions_to_frame(_sample())

    assert list(df.columns) == ["Id", "Date", "Description", "Category", "Amount", "Kind"]
    assert pd.api.types.is_datetime64_any_dtype(df["Date"])
    assert list(df["Kind"]) == ["expense", "income", "expense", "income", "expense"]

    empty = transactions_to_frame([])
    assert empty.empty
    assert pd.api.types.is_datetime64_any_dtype(empty["Date"])


def test_calculate_totals_income_expense_balance() -> None:
    df = transactions_to_frame([_tx(1, "2024-01-01", 100.0), _tx(2, "2024-01-02", -40.0)])

    assert calculate_totals(df) == {"income": 100.0, "expense": 40.0, "balance": 60.0}


def test_calculate_totals_counts_zero_as_income() -> None:
    df = transactions_to_frame([_tx(1, "2024-01-01", 0.0), _tx(2, "2024-01-02", -5.0)])

    assert calculate_totals(df) == {"income": 0.0, "expense": 5.0, "balance": -5.0}


def test_empty_snapshot_is_neutral() -> None:
    snapshot = build_aggregate_snapshot([])

    assert snapshot.totals == {"income": 0.0, "expense": 0.0, "balance": 0.0}
    assert snapshot.category_breakdown.empty
    assert snapshot.balance_trend is None
    assert not snapshot.has_trend
    assert snapshot.monthly_profit_loss.empty
    assert snapshot.recent.empty


def test_category_breakdown_sorted_with_percentages() -> None:
    out = category_breakdown(transactions_to_frame(_sample()))

    assert list(out["Category"]) == ["Transport", "Groceries"]
    assert list(out["Amount"]) == [70.0, 30.0]
    assert list(out["Percentage"]) == pytest.approx([70.0, 30.0])


def test_category_breakdown_ties_keep_first_seen_order() -> None:
    df = transactions_to_frame(
        [
            _tx(1, "2024-01-01", -10.0, "Books"),
            _tx(2, "2024-01-02", -25.0, "Rent"),
            _tx(3, "2024-01-03", -10.0, "Apps"),
            _tx(4, "2024-01-04", -10.0, "Cafe"),
        ]
    )

    out = category_breakdown(df)

    assert list(out["Category"]) == ["Rent", "Books", "Apps", "Cafe"]


def test_category_breakdown_percentages_sum_to_100() -> None:
    amounts = [-0.1, -0.2, -0.3, -13.37, -1e6, -42.42, -7.0]
    df = transactions_to_frame(
        [_tx(idx, "2024-01-01", amount, f"C{idx % 4}") for idx, amount in enumerate(amounts)]
    )

    out = category_breakdown(df)

    assert abs(float(out["Percentage"].sum()) - 100.0) < 1e-6


def test_category_breakdown_without_expenses_is_empty() -> None:
    out = category_breakdown(transactions_to_frame([_tx(1, "2024-01-01", 10.0)]))

    assert out.empty
    assert list(out.columns) == ["Category", "Amount", "Percentage"]


def test_balance_trend_requires_two_transactions() -> None:
    assert balance_trend(transactions_to_frame([_tx(1, "2024-01-01", 5.0)])) is None


def test_balance_trend_sorts_by_date_and_accumulates() -> None:
    trend = balance_trend(transactions_to_frame(_sample()))

    assert list(trend["Date"].dt.strftime("%Y-%m-%d")) == [
        "2024-01-15",
        "2024-01-20",
        "2024-02-01",
        "2024-02-03",
        "2024-02-03",
    ]
    assert list(trend["Balance"]) == [50.0, 30.0, 1030.0, 1000.0, 950.0]
    assert trend["Date"].is_monotonic_increasing


def test_balance_trend_same_day_keeps_list_order() -> None:
    trend = balance_trend(
        transactions_to_frame([_tx(1, "2024-01-01", -5.0), _tx(2, "2024-01-01", 100.0)])
    )

    assert list(trend["Balance"]) == [-5.0, 95.0]


def test_monthly_profit_loss_groups_by_month() -> None:
    df = transactions_to_frame([_tx(1, "2024-01-15", 50.0), _tx(2, "2024-01-20", -20.0)])

    out = monthly_profit_loss(df)

    assert list(out.index) == ["2024-01"]
    assert out.loc["2024-01"].to_dict() == {"Income": 50.0, "Expense": 20.0, "Net": 30.0}


def test_monthly_profit_loss_sorted_by_month_key() -> None:
    df = transactions_to_frame(
        [
            _tx(1, "2024-11-02", -5.0),
            _tx(2, "2023-12-31", 7.0),
            _tx(3, "2024-02-29", 3.0),
        ]
    )

    out = monthly_profit_loss(df)

    assert list(out.index) == ["2023-12", "2024-02", "2024-11"]
    assert list(out["Net"]) == [7.0, 3.0, -5.0]


def test_recent_transactions_newest_first_and_limited() -> None:
    many = [_tx(idx, f"2024-01-{idx:02d}", 1.0) for idx in range(1, 16)]

    out = recent_transactions(transactions_to_frame(many))

    assert len(out) == 10
    assert list(out["Id"][:3]) == [15, 14, 13]


def test_snapshot_is_repeatable_and_leaves_input_alone() -> None:
    transactions = _sample()
    before = list(transactions)

    first = build_aggregate_snapshot(transactions)
    second = build_aggregate_snapshot(transactions)

    assert transactions == before
    assert first.totals == second.totals
    pd.testing.assert_frame_equal(first.category_breakdown, second.category_breakdown)
    pd.testing.assert_frame_equal(first.balance_trend, second.balance_trend)
    pd.testing.assert_frame_equal(first.monthly_profit_loss, second.monthly_profit_loss)
    assert first.totals == {"income": 1050.0, "expense": 100.0, "balance": 950.0}
