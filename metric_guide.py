"""Human-readable metric definitions for the app."""

from __future__ import annotations

from models import domain_labels


def metric_guide(domain: str) -> list[dict[str, str]]:
    """Definitions table using the income/expense wording of the chosen domain."""
    labels = domain_labels(domain)
    income, expense, balance = labels["income"], labels["expense"], labels["balance"]
    return [
        {
            "Metric": income,
            "Meaning": "Total of all incoming amounts.",
            "Formula": "sum(amount) where amount >= 0",
        },
        {
            "Metric": expense,
            "Meaning": "Total of all outgoing amounts, shown as a positive number.",
            "Formula": "sum(|amount|) where amount < 0",
        },
        {
            "Metric": balance,
            "Meaning": "What is left after outflows are subtracted from inflows.",
            "Formula": f"{income} - {expense}",
        },
        {
            "Metric": "Spending by category",
            "Meaning": f"How {expense.lower()} split across categories, largest first.",
            "Formula": f"sum(|amount|) per category / {expense} * 100",
        },
        {
            "Metric": "Balance trend",
            "Meaning": "Running balance after each transaction, oldest first. Needs two or more transactions.",
            "Formula": "cumsum(amount) ordered by date",
        },
        {
            "Metric": "Monthly net",
            "Meaning": f"{income} minus {expense.lower()} for each calendar month.",
            "Formula": f"{income}(month) - {expense}(month)",
        },
    ]
