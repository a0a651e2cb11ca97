"""Terminal and JSON rendering of search and fetch results."""

from __future__ import annotations

from weavex.models.web import FetchResponse, SearchResponse

SEARCH_PREVIEW_CHARS = 200
FETCH_PREVIEW_CHARS = 1000
MAX_LISTED_LINKS = 10


def format_search_results(response: SearchResponse, as_json: bool = False) -> str:
    if as_json:
        return response.model_dump_json(indent=2)

    if not response.results:
        return "No results found.\n"

    lines = [f"Found {len(response.results)} results:", ""]
    for idx, result in enumerate(response.results, start=1):
        preview = result.content
        if len(preview) > SEARCH_PREVIEW_CHARS:
            preview = preview[:SEARCH_PREVIEW_CHARS] + "..."
        lines.append(f"{idx}. {result.title}")
        lines.append(f"   {result.url}")
        lines.append(f"   {preview}")
        lines.append("")
    return "\n".join(lines) + "\n"


def format_fetch_response(response: FetchResponse, as_json: bool = False) -> str:
    if as_json:
        return response.model_dump_json(indent=2)

    content = response.content
    if len(content) > FETCH_PREVIEW_CHARS:
        content = (
            content[:FETCH_PREVIEW_CHARS]
            + "...\n\n[Content truncated. Use --json for full content]"
        )

    output = f"Title: {response.title}\n\nContent:\n{content}\n\n"
    if response.links:
        output += f"Found {len(response.links)} links:\n"
        for idx, link in enumerate(response.links[:MAX_LISTED_LINKS], start=1):
            output += f"  {idx}. {link}\n"
        if len(response.links) > MAX_LISTED_LINKS:
            output += f"  ... and {len(response.links) - MAX_LISTED_LINKS} more\n"
    return output


def format_search_markdown(response: SearchResponse) -> str:
    """Markdown page of search results for the browser preview."""
    parts = [f"# Search Results\n\nFound {len(response.results)} results:\n\n"]
    for idx, result in enumerate(response.results, start=1):
        parts.append(f"## {idx}. {result.title}\n\n")
        parts.append(f"**URL:** [{result.url}]({result.url})\n\n")
        parts.append(f"{result.content}\n\n")
    return "".join(parts)
