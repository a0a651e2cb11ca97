"""Chat client protocol shared by all providers."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from weavex.models.messages import AssistantTurn, Message, ToolCall, ToolSchema
from weavex.utils.ids import fallback_call_id


@runtime_checkable
class ChatClient(Protocol):
    """Protocol that all chat providers must satisfy."""

    model: str

    def send(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSchema],
        reasoning_enabled: bool = True,
    ) -> AssistantTurn:
        """Send the transcript and tool declarations, return the assistant turn.

        Args:
            messages: The full transcript, oldest first.
            tools: Tools the model may call.
            reasoning_enabled: Ask the model for a reasoning trace.

        Raises:
            ModelConnectionError: Server unreachable or timed out.
            MalformedResponse: Response could not be parsed.
            ApiError: Server answered with an error status.
        """
        ...

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        ...


def build_tool_calls(raw_calls: Sequence[tuple[str | None, str, dict[str, Any]]]) -> list[ToolCall]:
    """Build ToolCalls from ``(id, name, arguments)`` triples.

    Missing or repeated ids are replaced so ids stay unique within the turn.
    """
    calls: list[ToolCall] = []
    seen: set[str] = set()
    for index, (call_id, name, arguments) in enumerate(raw_calls):
        if not call_id or call_id in seen:
            n = index
            call_id = fallback_call_id(n)
            while call_id in seen:
                n += 1
                call_id = fallback_call_id(n)
        seen.add(call_id)
        calls.append(ToolCall(id=call_id, name=name, arguments=arguments))
    return calls
