"""OpenAI-compatible chat client (OpenAI, Ollama's ``/v1``, vLLM, ...)."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

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


def encode_message(message: Message) -> dict[str, Any]:
    """Convert a transcript message to the chat-completions message shape."""
    if isinstance(message, AssistantMessage):
        data: dict[str, Any] = {"role": "assistant", "content": message.content}
        if message.tool_calls:
            data["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": json.dumps(call.arguments)},
                }
                for call in message.tool_calls
            ]
        return data
    if isinstance(message, ToolMessage):
        return {"role": "tool", "tool_call_id": message.tool_call_id, "content": message.content}
    return {"role": message.role, "content": message.content}


class OpenAIChatClient:
    """Wrapper around the ``openai`` SDK.

    Defaults to the local Ollama server's OpenAI-compatible endpoint, which
    ignores the API key.  SDK retries are disabled: a failed request is
    reported to the agent loop as-is.
    """

    def __init__(
        self,
        model: str,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_CHAT_TIMEOUT,
        reasoning_effort: str | None = "medium",
        http_client: Any | None = None,
    ) -> None:
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "The 'openai' package is required.  Install it with: "
                "pip install weavex[openai]"
            ) from exc

        self._openai = openai
        self.model = model
        self._reasoning_effort = reasoning_effort
        self._client = openai.OpenAI(
            api_key=api_key or "ollama",
            base_url=base_url or f"{get_ollama_host()}/v1",
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    def send(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSchema],
        reasoning_enabled: bool = True,
    ) -> AssistantTurn:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [encode_message(m) for m in messages],
        }
        if tools:
            kwargs["tools"] = [t.to_wire() for t in tools]
        if reasoning_enabled and self._reasoning_effort:
            kwargs["reasoning_effort"] = self._reasoning_effort

        logger.debug("Sending chat completion request for model %s", self.model)
        try:
            response = self._client.chat.completions.create(**kwargs)
        except self._openai.APIConnectionError as exc:
            raise ModelConnectionError(f"Could not reach chat endpoint: {exc}") from exc
        except self._openai.APIStatusError as exc:
            raise ApiError(exc.status_code, exc.message) from exc

        if not response.choices:
            raise MalformedResponse("Chat completion response contained no choices")
        message = response.choices[0].message

        raw_calls = []
        for call in message.tool_calls or []:
            try:
                arguments = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError as exc:
                raise MalformedResponse(
                    f"Tool call '{call.function.name}' has non-JSON arguments: {exc}"
                ) from exc
            if not isinstance(arguments, dict):
                raise MalformedResponse(
                    f"Tool call '{call.function.name}' arguments must be an object"
                )
            raw_calls.append((call.id, call.function.name, arguments))

        extra = message.model_extra or {}
        thinking = extra.get("reasoning_content") or extra.get("reasoning")
        return AssistantTurn(
            content=message.content or "",
            thinking=thinking if isinstance(thinking, str) and thinking else None,
            tool_calls=build_tool_calls(raw_calls),
        )

    def close(self) -> None:
        self._client.close()
