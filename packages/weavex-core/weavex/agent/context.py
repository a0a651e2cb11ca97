"""Transcript ownership and the tool-result size budget."""

from __future__ import annotations

from typing import Iterable, Iterator

from weavex.errors import OrphanToolResult
from weavex.models.messages import AssistantMessage, Message, ToolCall, ToolMessage

DEFAULT_RESULT_LIMIT = 8000
TRUNCATION_MARKER = "... [truncated]"

_ACTION_LABELS = {
    "web_search": "searching the web",
    "web_fetch": "fetching a webpage",
}


def truncate(content: str, limit: int = DEFAULT_RESULT_LIMIT) -> tuple[str, bool]:
    """Cut *content* to *limit* characters and mark it.

    Content at or under the limit comes back untouched with ``False``.
    Longer content becomes ``content[:limit] + TRUNCATION_MARKER`` with
    ``True``.  Applying it again at the same limit returns the same string.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if len(content) <= limit:
        return content, False
    return content[:limit] + TRUNCATION_MARKER, True


class Transcript:
    """Append-only conversation history for one agent session.

    A tool message is only accepted while it answers a still-outstanding
    call of the most recent assistant message.
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = []
        for message in messages:
            self.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def append(self, message: Message) -> None:
        """Add *message* at the end.

        Raises:
            OrphanToolResult: *message* is a tool result with no matching
                outstanding call.
        """
        if isinstance(message, ToolMessage):
            pending = {call.id for call in self.outstanding_calls()}
            if message.tool_call_id not in pending:
                raise OrphanToolResult(message.tool_call_id)
        self._messages.append(message)

    def outstanding_calls(self) -> list[ToolCall]:
        """Calls of the latest assistant message that have no result yet.

        Empty if anything other than tool results follows that message.
        """
        answered: set[str] = set()
        for message in reversed(self._messages):
            if isinstance(message, ToolMessage):
                answered.add(message.tool_call_id)
                continue
            if isinstance(message, AssistantMessage):
                return [c for c in message.tool_calls if c.id not in answered]
            return []
        return []

    def last_assistant(self) -> AssistantMessage | None:
        for message in reversed(self._messages):
            if isinstance(message, AssistantMessage):
                return message
        return None

    def last_action(self) -> str:
        """Short description of the latest activity, for status messages.

        A trailing tool result reads as "processing tool response"; otherwise
        the first call of the latest assistant turn is named.
        """
        for message in reversed(self._messages):
            if isinstance(message, ToolMessage):
                return "processing tool response"
            if isinstance(message, AssistantMessage) and message.tool_calls:
                name = message.tool_calls[0].name
                return _ACTION_LABELS.get(name, f"using {name}")
        return "reasoning"
