"""Chat model configuration from environment variables."""

from __future__ import annotations

import os

# Supported providers
PROVIDERS = ("ollama", "openai")

# Defaults
DEFAULT_PROVIDER = "ollama"
DEFAULT_MODEL = "gpt-oss:20b"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_CHAT_TIMEOUT = 300.0


def get_provider() -> str:
    """Return the configured chat provider name.

    Reads ``WEAVEX_CHAT_PROVIDER``; defaults to ``ollama``.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = os.environ.get("WEAVEX_CHAT_PROVIDER", "").lower() or DEFAULT_PROVIDER
    if provider not in PROVIDERS:
        raise ValueError(f"Unsupported chat provider: {provider!r}. Choose from {PROVIDERS}")
    return provider


def get_model() -> str:
    """Return the model from ``WEAVEX_MODEL``, or the default local model."""
    return os.environ.get("WEAVEX_MODEL") or DEFAULT_MODEL


def get_ollama_host() -> str:
    """Return the local Ollama server URL from ``OLLAMA_HOST``."""
    host = os.environ.get("OLLAMA_HOST") or DEFAULT_OLLAMA_HOST
    if "://" not in host:
        host = f"http://{host}"
    return host.rstrip("/")
