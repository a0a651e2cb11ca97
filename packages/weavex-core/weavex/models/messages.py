"""Transcript message models — one variant per role.

``Message`` is a discriminated union on ``role``; each variant only carries
the fields that make sense for it, and unknown fields are rejected, so a
``tool_call_id`` on a user message cannot be constructed.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ToolCall(_Frozen):
    """A tool invocation requested by the model."""
    id: str = Field(..., description="Unique within one assistant turn")
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResult(_Frozen):
    """Output of executing a ToolCall, after the size budget was applied."""
    tool_call_id: str
    content: str
    truncated: bool = False


class ToolSchema(_Frozen):
    """Declaration of a callable tool advertised to the model."""
    name: str
    description: str
    parameters: dict[str, Any]

    def to_wire(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class SystemMessage(_Frozen):
    role: Literal["system"] = "system"
    content: str


class UserMessage(_Frozen):
    role: Literal["user"] = "user"
    content: str


class AssistantMessage(_Frozen):
    role: Literal["assistant"] = "assistant"
    content: str = ""
    thinking: str | None = Field(None, description="Reasoning trace, display only")
    tool_calls: list[ToolCall] = Field(default_factory=list)


class ToolMessage(_Frozen):
    role: Literal["tool"] = "tool"
    tool_call_id: str
    tool_name: str
    content: str
    truncated: bool = False


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage],
    Field(discriminator="role"),
]

MESSAGE_LIST_ADAPTER: TypeAdapter[list[Message]] = TypeAdapter(list[Message])


class AssistantTurn(BaseModel):
    """A parsed reply from the chat endpoint."""
    content: str = ""
    thinking: str | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def to_message(self, *, keep_thinking: bool = True) -> AssistantMessage:
        return AssistantMessage(
            content=self.content,
            thinking=self.thinking if keep_thinking and self.thinking else None,
            tool_calls=list(self.tool_calls),
        )
