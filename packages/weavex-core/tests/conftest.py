"""Shared test fixtures — scripted chat client and fake web client."""

from __future__ import annotations

from typing import Any, Sequence

import pytest

from weavex.config import WebConfig
from weavex.errors import WebRequestError
from weavex.models.messages import AssistantTurn, Message, ToolCall, ToolSchema
from weavex.models.web import FetchResponse, SearchResponse, SearchResult


def tool_turn(*calls: tuple[str, dict[str, Any]], content: str = "", thinking: str | None = None) -> AssistantTurn:
    """An assistant turn requesting ``(name, arguments)`` calls, ids call_0, call_1, ..."""
    return AssistantTurn(
        content=content,
        thinking=thinking,
        tool_calls=[ToolCall(id=f"call_{i}", name=name, arguments=args) for i, (name, args) in enumerate(calls)],
    )


def answer_turn(content: str, thinking: str | None = None) -> AssistantTurn:
    return AssistantTurn(content=content, thinking=thinking)


class ScriptedChatClient:
    """A chat client that replays a list of turns (or raises queued exceptions).

    The last entry is repeated once the script runs out.  Every call is
    recorded in ``calls`` with a snapshot of the messages it received.
    """

    model = "scripted-model"

    def __init__(self, script: Sequence[AssistantTurn | Exception]) -> None:
        self.script = list(script)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def send(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSchema],
        reasoning_enabled: bool = True,
    ) -> AssistantTurn:
        self.calls.append(
            {"messages": list(messages), "tools": list(tools), "reasoning_enabled": reasoning_enabled}
        )
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FakeWebClient:
    """Stands in for WebClient; pages are looked up by URL.

    Like WebClient, a search without *max_results* falls back to ``config``.
    """

    def __init__(
        self,
        results: list[SearchResult] | None = None,
        pages: dict[str, FetchResponse] | None = None,
    ) -> None:
        self.results = results if results is not None else [
            SearchResult(title="Tokio", url="https://tokio.rs", content="An async runtime for Rust"),
            SearchResult(title="async-std", url="https://async.rs", content="Async version of std"),
        ]
        self.pages = pages or {}
        self.searches: list[tuple[str, int | None]] = []
        self.fetches: list[str] = []
        self.config: WebConfig | None = None

    def search(self, query: str, max_results: int | None = None) -> SearchResponse:
        if max_results is None and self.config is not None:
            max_results = self.config.max_results
        self.searches.append((query, max_results))
        hits = self.results[:max_results] if max_results else self.results
        return SearchResponse(results=hits)

    def fetch(self, url: str) -> FetchResponse:
        self.fetches.append(url)
        if url not in self.pages:
            raise WebRequestError(f"HTTP request failed: connection reset fetching {url}")
        return self.pages[url]

    def close(self) -> None:
        pass

    def __enter__(self) -> FakeWebClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        pass


@pytest.fixture
def web_client():
    """Return a fresh FakeWebClient."""
    return FakeWebClient()
