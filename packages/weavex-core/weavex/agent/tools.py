"""ToolRegistry — declare tools, validate arguments, dispatch to collaborators."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from weavex.errors import InvalidArguments, ToolExecutionError, UnknownTool
from weavex.models.messages import ToolSchema
from weavex.utils.jsonschema import check_schema, validate_json
from weavex.web.client import WebClient

logger = logging.getLogger(__name__)

SEARCH_SNIPPET_CHARS = 500

WEB_SEARCH_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "pattern": r"\S",
            "description": "The search query to execute",
        },
        "max_results": {
            "type": "integer",
            "minimum": 1,
            "description": "Maximum number of results to return (optional)",
        },
    },
    "required": ["query"],
    "additionalProperties": False,
}

WEB_FETCH_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "url": {
            "type": "string",
            "pattern": r"\S",
            "description": "The URL to fetch and parse",
        },
    },
    "required": ["url"],
    "additionalProperties": False,
}


class ToolRegistry:
    """Registry of callable tools with JSON-schema argument validation.

    Tools are registered while the registry is being built; ``freeze()``
    closes it, after which the name → function mapping never changes.
    """

    def __init__(self) -> None:
        self._tools: dict[str, _ToolEntry] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        fn: Callable[..., Any],
        description: str,
        args_schema: dict[str, Any],
    ) -> None:
        """Register a tool by name."""
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        check_schema(args_schema)
        self._tools[name] = _ToolEntry(
            fn=fn,
            schema=ToolSchema(name=name, description=description, parameters=args_schema),
        )

    def freeze(self) -> ToolRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> list[str]:
        return list(self._tools.keys())

    def describe(self) -> list[ToolSchema]:
        """Schemas of all tools, in registration order."""
        return [entry.schema for entry in self._tools.values()]

    def dispatch(self, name: str, arguments: dict[str, Any]) -> str:
        """Call a registered tool and return its text output.

        Raises:
            UnknownTool: *name* is not registered.
            InvalidArguments: *arguments* fail the tool's schema.
            ToolExecutionError: The tool itself failed.
        """
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownTool(name)

        errors = validate_json(arguments, entry.schema.parameters)
        if errors:
            raise InvalidArguments(name, errors)

        try:
            result = entry.fn(**arguments)
        except Exception as exc:
            raise ToolExecutionError(name, str(exc) or type(exc).__name__) from exc

        if isinstance(result, str):
            return result
        return json.dumps(result, indent=2, default=str)


class _ToolEntry:
    __slots__ = ("fn", "schema")

    def __init__(self, fn: Callable[..., Any], schema: ToolSchema):
        self.fn = fn
        self.schema = schema


def build_web_tools(client: WebClient) -> ToolRegistry:
    """Registry with ``web_search`` and ``web_fetch`` backed by *client*.

    When the model does not ask for a specific result count the client's
    configured ``max_results`` applies.  Fetched pages are returned whole; the
    agent's result budget is the only cut.
    """

    def web_search(query: str, max_results: int | None = None) -> str:
        logger.info("Executing web_search: query=%r, max_results=%s", query, max_results)
        response = client.search(query, max_results=max_results)
        if not response.results:
            return "No results found."
        parts = []
        for idx, hit in enumerate(response.results, start=1):
            parts.append(
                f"Result {idx}:\nTitle: {hit.title}\nURL: {hit.url}\n"
                f"Content: {hit.content[:SEARCH_SNIPPET_CHARS]}\n\n"
            )
        return "".join(parts)

    def web_fetch(url: str) -> str:
        logger.info("Executing web_fetch: url=%r", url)
        page = client.fetch(url)
        return (
            f"Title: {page.title}\n\nContent:\n{page.content}"
            f"\n\nLinks found: {len(page.links)}"
        )

    registry = ToolRegistry()
    registry.register(
        "web_search",
        web_search,
        description=(
            "Search the web for information. Returns a list of search results "
            "with titles, URLs, and content snippets."
        ),
        args_schema=WEB_SEARCH_SCHEMA,
    )
    registry.register(
        "web_fetch",
        web_fetch,
        description=(
            "Fetch and parse content from a specific URL. Returns the page "
            "title, content, and links."
        ),
        args_schema=WEB_FETCH_SCHEMA,
    )
    return registry.freeze()
