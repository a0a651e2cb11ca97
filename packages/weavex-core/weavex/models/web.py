"""Web search API payloads."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single hit from the web search endpoint."""
    title: str = ""
    url: str
    content: str = Field("", description="Snippet text")


class SearchResponse(BaseModel):
    results: list[SearchResult] = Field(default_factory=list)


class FetchResponse(BaseModel):
    """Extracted page returned by the web fetch endpoint."""
    title: str = ""
    content: str = ""
    links: list[str] = Field(default_factory=list)
