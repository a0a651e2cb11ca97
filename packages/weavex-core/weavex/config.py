"""Web search API configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from weavex.errors import ConfigError

DEFAULT_BASE_URL = "https://ollama.com/api"
DEFAULT_TIMEOUT = 30.0

API_KEY_HELP = (
    "API key not found. Set OLLAMA_API_KEY environment variable or use --api-key flag.\n"
    "Get your key at: https://ollama.com"
)


@dataclass(frozen=True)
class WebConfig:
    """Settings for the hosted web search / fetch API."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_results: int | None = None

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigError(API_KEY_HELP)
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        if self.max_results is not None and self.max_results < 1:
            raise ConfigError(f"max_results must be at least 1, got {self.max_results}")

    def with_base_url(self, url: str) -> WebConfig:
        return replace(self, base_url=url.rstrip("/"))

    def with_timeout(self, timeout: float) -> WebConfig:
        return replace(self, timeout=timeout)

    def with_max_results(self, max_results: int | None) -> WebConfig:
        return replace(self, max_results=max_results)

    @classmethod
    def from_env(cls, api_key: str | None = None) -> WebConfig:
        """Build a config from ``OLLAMA_API_KEY``, ``OLLAMA_BASE_URL`` and ``OLLAMA_TIMEOUT``.

        An explicit *api_key* wins over the environment.  A non-numeric
        ``OLLAMA_TIMEOUT`` is ignored.

        Raises:
            ConfigError: If no API key is available.
        """
        key = api_key or os.environ.get("OLLAMA_API_KEY", "")
        config = cls(api_key=key)

        base_url = os.environ.get("OLLAMA_BASE_URL")
        if base_url:
            config = config.with_base_url(base_url)

        timeout_raw = os.environ.get("OLLAMA_TIMEOUT")
        if timeout_raw:
            try:
                config = config.with_timeout(float(timeout_raw))
            except ValueError:
                pass

        return config
