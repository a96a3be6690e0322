"""Thin wrapper around the OpenAI chat completions API.

Both external calls (column reconciliation and advisory questions) go through
``complete_chat``. Callers translate failures into their own error types.
"""

from __future__ import annotations

from typing import Any, Mapping

from openai import OpenAI


def create_client(api_key: str) -> OpenAI:
    key = str(api_key or "").strip()
    if not key:
        raise ValueError("OpenAI API key is not configured.")
    return OpenAI(api_key=key)


def complete_chat(
    client: Any,
    *,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    response_format: Mapping[str, Any] | None = None,
) -> str:
    """Run one non-streaming completion and return the first message text ("" if none)."""
    kwargs: dict[str, Any] = {
        "model": model,
        "temperature": temperature,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    }
    if response_format is not None:
        kwargs["response_format"] = dict(response_format)

    response = client.chat.completions.create(**kwargs)
    content = response.choices[0].message.content if response.choices else ""
    return content or ""
