"""Tests for the browser preview and the Markdown search-results page."""

from __future__ import annotations

import base64
import webbrowser
from pathlib import Path

import pytest

from weavex import preview
from weavex.errors import PreviewError
from weavex.models.web import SearchResponse, SearchResult
from weavex.web.formatting import format_search_markdown


@pytest.fixture
def opened(monkeypatch):
    urls: list[str] = []
    monkeypatch.setattr(webbrowser, "open", lambda url: urls.append(url) or True)
    return urls


class TestMarkdownToHtml:
    def test_standalone_document(self):
        html = preview.markdown_to_html("# Rust\n\nTokio is an async runtime.")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Weavex Result</title>" in html
        assert "Generated by Weavex" in html
        assert "Tokio is an async runtime." in html

    def test_text_is_escaped(self):
        html = preview.markdown_to_html("a < b & c")
        assert "a &lt; b &amp; c" in html

    def test_links_kept(self):
        html = preview.markdown_to_html("See [tokio](https://tokio.rs).")
        assert 'href="https://tokio.rs"' in html


class TestOpenHtml:
    def test_small_page_uses_data_url(self, opened):
        url = preview.open_html("<p>hi</p>")
        assert opened == [url]
        prefix = "data:text/html;charset=utf-8;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]).decode("utf-8") == "<p>hi</p>"

    def test_large_page_uses_temp_file(self, opened, monkeypatch, tmp_path):
        monkeypatch.setattr(preview.tempfile, "gettempdir", lambda: str(tmp_path))
        html = "x" * 1_600_000
        url = preview.open_html(html)
        assert url.startswith("file://")
        written = list(tmp_path.glob("weavex_result_*.html"))
        assert len(written) == 1
        assert Path(written[0]).read_text(encoding="utf-8") == html
        assert opened == [url]

    def test_browser_failure(self, monkeypatch):
        monkeypatch.setattr(webbrowser, "open", lambda url: False)
        with pytest.raises(PreviewError, match="Failed to open browser"):
            preview.open_html("<p>hi</p>")

    def test_open_markdown(self, opened):
        preview.open_markdown_in_browser("**bold** claim")
        html = base64.b64decode(opened[0].split(",", 1)[1]).decode("utf-8")
        assert "bold" in html


class TestSearchMarkdown:
    def test_layout(self):
        response = SearchResponse(results=[
            SearchResult(title="Tokio", url="https://tokio.rs", content="Async runtime"),
        ])
        assert format_search_markdown(response) == (
            "# Search Results\n\nFound 1 results:\n\n"
            "## 1. Tokio\n\n"
            "**URL:** [https://tokio.rs](https://tokio.rs)\n\n"
            "Async runtime\n\n"
        )

    def test_empty(self):
        assert format_search_markdown(SearchResponse()) == "# Search Results\n\nFound 0 results:\n\n"
