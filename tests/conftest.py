"""Shared fixtures: a fake OpenAI client that records calls and replays canned replies."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest


class FakeOpenAI:
    """Mimics ``client.chat.completions.create`` for one canned reply or error."""

    def __init__(self, content: str | None = "", error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._content = content
        self._error = error
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        message = SimpleNamespace(content=self._content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    @property
    def last_user_prompt(self) -> str:
        return self.calls[-1]["messages"][-1]["content"]


@pytest.fixture
def fake_openai():
    return FakeOpenAI
