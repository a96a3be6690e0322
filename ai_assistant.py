"""Free-text financial questions answered by an LLM over a transaction sample."""

from __future__ import annotations

import json
from typing import Any, Sequence

from openai import OpenAIError

from logging_setup import get_logger
from models import BUSINESS, Transaction, normalize_domain
from openai_client import complete_chat, create_client
from settings import DEFAULT_MODEL, DEFAULT_TEMPERATURE

ADVISORY_TRANSACTION_LIMIT = 50

logger = get_logger("ledgerlens.ai_assistant")


class AdvisoryError(RuntimeError):
    """The advisory service could not answer the question."""


def _system_prompt(domain: str) -> str:
    if domain == BUSINESS:
        return (
            "You are an expert business financial advisor. Talk about revenue, costs and profit. "
            "Give short, accurate and actionable answers with numbers and no generic advice."
        )
    return (
        "You are an expert personal financial advisor. Talk about income, expenses and savings. "
        "Give short, accurate and actionable answers with numbers and no generic advice."
    )


def build_advisory_prompt(transactions: Sequence[Transaction], question: str, domain: str) -> str:
    """Embed the first ``ADVISORY_TRANSACTION_LIMIT`` transactions and the user's question."""
    domain = normalize_domain(domain)
    sample = [tx.to_dict() for tx in list(transactions)[:ADVISORY_TRANSACTION_LIMIT]]
    framing = "business" if domain == BUSINESS else "personal"
    lines = [
        f"Based on the following JSON {framing} transaction data, answer the user's question.",
        "Positive amounts are inflows, negative amounts are outflows.",
        "Keep the advice direct and to the point.",
        "",
        "Transaction Data:",
        json.dumps(sample, indent=2, ensure_ascii=False),
        "",
        "User's Question:",
        f'"{question.strip()}"',
    ]
    return "\n".join(lines)


def ask_advisor(
    transactions: Sequence[Transaction],
    question: str,
    domain: str,
    *,
    client: Any = None,
    api_key: str = "",
    model: str = DEFAULT_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
) -> str:
    """Return the service's answer text exactly as received."""
    if not str(question or "").strip():
        raise ValueError("Question must not be empty.")

    prompt = build_advisory_prompt(transactions, question, domain)
    if client is None:
        try:
            client = create_client(api_key)
        except ValueError as exc:
            raise AdvisoryError(str(exc)) from exc

    try:
        answer = complete_chat(
            client,
            model=model,
            system_prompt=_system_prompt(normalize_domain(domain)),
            user_prompt=prompt,
            temperature=temperature,
        )
    except OpenAIError as exc:
        logger.warning("Advisory call failed: %s", exc)
        raise AdvisoryError("Failed to get insights. Please try again.") from exc

    if not answer.strip():
        raise AdvisoryError("The AI service returned an empty answer. Please try again.")
    return answer
