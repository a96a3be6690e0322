"""Derived aggregates that drive the dashboard charts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from models import Transaction

FRAME_COLUMNS = ["Id", "Date", "Description", "Category", "Amount", "Kind"]


def transactions_to_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Tabulate transactions in list order with a datetime ``Date`` column."""
    df = pd.DataFrame(
        [
            {
                "Id": tx.id,
                "Date": tx.date,
                "Description": tx.description,
                "Category": tx.category,
                "Amount": float(tx.amount),
                "Kind": tx.kind,
            }
            for tx in transactions
        ],
        columns=FRAME_COLUMNS,
    )
    df["Date"] = pd.to_datetime(df["Date"])
    df["Amount"] = df["Amount"].astype(float)
    return df


def calculate_totals(df: pd.DataFrame) -> dict[str, float]:
    """Income, absolute expense and balance."""
    amounts = df["Amount"]
    income = float(amounts[amounts >= 0].sum())
    expense = float(amounts[amounts < 0].abs().sum())
    return {"income": income, "expense": expense, "balance": income - expense}


def category_breakdown(df: pd.DataFrame) -> pd.DataFrame:
    """Expense totals and share of all expenses per category, largest first.

    Ties keep the order in which categories first appear.
    """
    empty = pd.DataFrame(columns=["Category", "Amount", "Percentage"])
    expenses = df[df["Amount"] < 0]
    if expenses.empty:
        return empty

    out = (
        expenses.assign(Spent=expenses["Amount"].abs())
        .groupby("Category", sort=False)["Spent"]
        .sum()
        .reset_index(name="Amount")
    )
    total_expense = float(out["Amount"].sum())
    if not total_expense:
        return empty
    out["Percentage"] = out["Amount"] / total_expense * 100.0
    return out.sort_values("Amount", ascending=False, kind="stable").reset_index(drop=True)


def balance_trend(df: pd.DataFrame) -> pd.DataFrame | None:
    """Running balance per transaction in date order, or ``None`` below two transactions."""
    if len(df) < 2:
        return None
    ordered = df.sort_values("Date", kind="stable")
    return pd.DataFrame(
        {
            "Date": ordered["Date"].to_numpy(),
            "Balance": ordered["Amount"].cumsum().to_numpy(),
        }
    )


def monthly_profit_loss(df: pd.DataFrame) -> pd.DataFrame:
    """Aggregate income/expense/net by ``YYYY-MM`` month key."""
    amounts = df["Amount"]
    out = pd.DataFrame(
        {
            "Month": df["Date"].dt.strftime("%Y-%m"),
            "Income": amounts.where(amounts >= 0, 0.0),
            "Expense": (-amounts).where(amounts < 0, 0.0),
        }
    )
    summary = out.groupby("Month").agg(Income=("Income", "sum"), Expense=("Expense", "sum")).sort_index()
    summary["Net"] = summary["Income"] - summary["Expense"]
    return summary


def recent_transactions(df: pd.DataFrame, limit: int = 10) -> pd.DataFrame:
    """Newest transactions first."""
    return df.sort_values("Date", ascending=False, kind="stable").head(limit).reset_index(drop=True)


@dataclass(frozen=True)
class AggregateSnapshot:
    totals: dict[str, float]
    category_breakdown: pd.DataFrame
    balance_trend: pd.DataFrame | None
    monthly_profit_loss: pd.DataFrame
    recent: pd.DataFrame

    @property
    def has_trend(self) -> bool:
        return self.balance_trend is not None


def build_aggregate_snapshot(transactions: Sequence[Transaction]) -> AggregateSnapshot:
    """Compute every dashboard statistic from one transaction list."""
    df = transactions_to_frame(transactions)
    return AggregateSnapshot(
        totals=calculate_totals(df),
        category_breakdown=category_breakdown(df),
        balance_trend=balance_trend(df),
        monthly_profit_loss=monthly_profit_loss(df),
        recent=recent_transactions(df),
    )
