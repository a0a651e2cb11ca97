"""Browser preview — render Markdown as a standalone HTML page and open it.

Small pages are opened as a base64 ``data:`` URL; pages whose URL would be
too long for a browser are written to a temp file instead.
"""

from __future__ import annotations

import base64
import io
import logging
import tempfile
import time
import webbrowser
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown

from weavex.errors import PreviewError

logger = logging.getLogger(__name__)

MAX_DATA_URL_SIZE = 2_000_000
PAGE_WIDTH = 100

# str.format template for Console.export_html; literal braces are doubled
HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Weavex Result</title>
<style>
{stylesheet}
body {{
    color: {foreground};
    background-color: {background};
    max-width: 960px;
    margin: 0 auto;
    padding: 2rem;
}}
.meta {{
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
    opacity: 0.7;
    margin-bottom: 1.5rem;
}}
pre {{
    font-family: 'SFMono-Regular', Consolas, 'Liberation Mono', Menlo, monospace;
    line-height: 1.45;
    white-space: pre-wrap;
}}
a {{ color: inherit; }}
</style>
</head>
<body>
<div class="meta">🧵 Generated by Weavex</div>
<pre><code>{code}</code></pre>
</body>
</html>
"""


def markdown_to_html(markdown: str) -> str:
    """Render *markdown* with rich and export it as a complete HTML document."""
    console = Console(
        record=True,
        file=io.StringIO(),
        width=PAGE_WIDTH,
        force_terminal=True,
        color_system="truecolor",
    )
    console.print(Markdown(markdown))
    return console.export_html(inline_styles=True, code_format=HTML_TEMPLATE)


def open_html(html: str) -> str:
    """Open *html* in the default browser and return the URL used.

    Raises:
        PreviewError: If no browser could be launched.
    """
    encoded = base64.b64encode(html.encode("utf-8")).decode("ascii")
    url = f"data:text/html;charset=utf-8;base64,{encoded}"
    if len(url) > MAX_DATA_URL_SIZE:
        logger.debug("Data URL (%d bytes) exceeds limit, using temp file", len(url))
        url = _write_temp_file(html).as_uri()

    if not webbrowser.open(url):
        raise PreviewError("Failed to open browser")
    return url


def open_markdown_in_browser(markdown: str) -> str:
    return open_html(markdown_to_html(markdown))


def _write_temp_file(html: str) -> Path:
    path = Path(tempfile.gettempdir()) / f"weavex_result_{int(time.time())}.html"
    path.write_text(html, encoding="utf-8")
    logger.debug("Wrote preview to %s", path)
    return path
