"""Ollama chat client — native ``/api/chat`` with tool calling and thinking."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import httpx
from pydantic import BaseModel, Field, field_validator

from weavex.errors import ApiError, MalformedResponse, ModelConnectionError
from weavex.llm._base import build_tool_calls
from weavex.llm._config import DEFAULT_CHAT_TIMEOUT, get_ollama_host
from weavex.models.messages import (
    AssistantMessage,
    AssistantTurn,
    Message,
    ToolMessage,
    ToolSchema,
)

logger = logging.getLogger(__name__)


class _FunctionCall(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def _decode_string_arguments(cls, value: Any) -> Any:
        # Some models emit the arguments object as a JSON string
        if isinstance(value, str):
            return json.loads(value) if value.strip() else {}
        return value if value is not None else {}


class _WireToolCall(BaseModel):
    id: str | None = None
    function: _FunctionCall


class _ChatMessage(BaseModel):
    role: str = "assistant"
    content: str | None = None
    thinking: str | None = None
    tool_calls: list[_WireToolCall] | None = None


class _ChatResponse(BaseModel):
    model: str | None = None
    message: _ChatMessage
    done: bool = True


def encode_message(message: Message) -> dict[str, Any]:
    """Convert a transcript message to Ollama's chat message shape.

    Reasoning traces are display-only and are not sent back.
    """
    if isinstance(message, AssistantMessage):
        data: dict[str, Any] = {"role": "assistant", "content": message.content}
        if message.tool_calls:
            data["tool_calls"] = [
                {"id": call.id, "function": {"name": call.name, "arguments": call.arguments}}
                for call in message.tool_calls
            ]
        return data
    if isinstance(message, ToolMessage):
        return {
            "role": "tool",
            "content": message.content,
            "tool_name": message.tool_name,
            "tool_call_id": message.tool_call_id,
        }
    return {"role": message.role, "content": message.content}


class OllamaChatClient:
    """Sync httpx client for a local Ollama server.

    Usage::

        client = OllamaChatClient("qwen3:14b")
        turn = client.send(transcript.messages, registry.describe())
    """

    def __init__(
        self,
        model: str,
        base_url: str | None = None,
        timeout: float = DEFAULT_CHAT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.model = model
        self._base_url = (base_url or get_ollama_host()).rstrip("/")
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def send(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSchema],
        reasoning_enabled: bool = True,
    ) -> AssistantTurn:
        url = f"{self._base_url}/api/chat"
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [encode_message(m) for m in messages],
            "stream": False,
        }
        if tools:
            payload["tools"] = [t.to_wire() for t in tools]
        if reasoning_enabled:
            payload["think"] = True

        logger.debug("Sending chat request to local Ollama at: %s", url)
        try:
            response = self._client.post(url, json=payload)
        except httpx.TransportError as exc:
            raise ModelConnectionError(
                f"Could not reach local Ollama server at {self._base_url}: {exc}"
            ) from exc

        if response.is_error:
            raise ApiError(response.status_code, response.text or "Unknown error")

        # Decode, JSON and validation failures are all ValueError subclasses
        try:
            parsed = _ChatResponse.model_validate(response.json())
        except ValueError as exc:
            raise MalformedResponse(f"Failed to parse chat response: {exc}") from exc

        message = parsed.message
        tool_calls = build_tool_calls(
            [(c.id, c.function.name, c.function.arguments) for c in message.tool_calls or []]
        )
        return AssistantTurn(
            content=message.content or "",
            thinking=message.thinking or None,
            tool_calls=tool_calls,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> OllamaChatClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
