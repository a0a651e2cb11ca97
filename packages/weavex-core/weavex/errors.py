"""Error hierarchy for weavex.

Everything raised on purpose by the package derives from ``WeavexError`` so
the CLI can report it uniformly.  The agent loop only aborts on the chat
errors listed in ``FATAL_CHAT_ERRORS``; tool errors are turned into
model-visible results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weavex.agent.session import AgentSession
    from weavex.models.results import TerminationReason


class WeavexError(Exception):
    """Base for all weavex errors."""


class ConfigError(WeavexError):
    """Missing or invalid configuration (e.g. no API key)."""


class ApiError(WeavexError):
    """An upstream API answered with a non-success HTTP status.

    The body is kept verbatim so the caller sees what the server said.
    """

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"API returned error: {status} - {message}")


class WebRequestError(WeavexError):
    """Transport-level failure talking to the web search API."""


class ModelConnectionError(WeavexError):
    """The local model server could not be reached (refused or timed out)."""


class MalformedResponse(WeavexError):
    """A response body could not be parsed into the expected shape."""


class PreviewError(WeavexError):
    """The rendered result could not be opened in a browser."""


class ToolError(WeavexError):
    """Base for failures raised by the tool registry."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)


class UnknownTool(ToolError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(tool_name, f"Unknown tool '{tool_name}'")


class InvalidArguments(ToolError):
    def __init__(self, tool_name: str, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            tool_name,
            f"Invalid arguments for '{tool_name}': {'; '.join(self.errors)}",
        )


class ToolExecutionError(ToolError):
    """The collaborator behind a tool failed (network, parse, ...)."""


class OrphanToolResult(WeavexError):
    """A tool result does not answer an outstanding call of the last assistant turn."""

    def __init__(self, tool_call_id: str) -> None:
        self.tool_call_id = tool_call_id
        super().__init__(
            f"Tool result '{tool_call_id}' does not match an outstanding tool call"
        )


class AgentError(WeavexError):
    """The agent loop terminated without a final answer.

    Attributes:
        reason: ``iteration_limit`` or ``fatal_error``.
        session: The terminated session, for diagnostics (transcript, counts).
    """

    def __init__(
        self,
        message: str,
        reason: TerminationReason,
        session: AgentSession | None = None,
    ) -> None:
        self.reason = reason
        self.session = session
        super().__init__(message)

    @property
    def iteration_count(self) -> int:
        return self.session.iteration_count if self.session is not None else 0


FATAL_CHAT_ERRORS = (ModelConnectionError, MalformedResponse, ApiError)
