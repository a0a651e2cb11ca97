"""Hosted web search API client."""

from weavex.web.client import WebClient

__all__ = ["WebClient"]
