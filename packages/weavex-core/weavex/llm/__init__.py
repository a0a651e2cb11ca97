"""Chat clients — provider-agnostic interface for a tool-calling model."""

from __future__ import annotations

from weavex.llm._base import ChatClient
from weavex.llm._config import get_model, get_provider

__all__ = ["ChatClient", "get_chat_client"]


def get_chat_client(
    provider: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
) -> ChatClient:
    """Create a chat client.

    Unset arguments come from ``WEAVEX_CHAT_PROVIDER``, ``WEAVEX_MODEL`` and
    ``OLLAMA_HOST``.
    """
    provider = (provider or get_provider()).lower()
    model = model or get_model()

    if provider == "ollama":
        from weavex.llm._ollama import OllamaChatClient

        return OllamaChatClient(model, base_url=base_url)

    if provider == "openai":
        from weavex.llm._openai import OpenAIChatClient

        return OpenAIChatClient(model, base_url=base_url)

    raise ValueError(f"Unsupported chat provider: {provider!r}")
