"""CLI — search, fetch, and run the research agent."""

from __future__ import annotations

import json
import logging
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from typer.core import TyperGroup

from weavex.config import DEFAULT_TIMEOUT, WebConfig
from weavex.errors import AgentError, WeavexError
from weavex.models.results import TerminationReason


class _DefaultSearchGroup(TyperGroup):
    """Treat ``weavex QUERY`` as ``weavex search QUERY``."""

    def resolve_command(self, ctx, args):
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            args = ["search", *args]
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="weavex",
    cls=_DefaultSearchGroup,
    help=(
        "Weave together web search and AI reasoning for autonomous research.\n\n"
        "A bare query runs a search: weavex \"what is rust programming\""
    ),
    no_args_is_help=True,
)

EXIT_ERROR = 1
EXIT_INCOMPLETE = 2


@dataclass
class _CliState:
    api_key: str | None
    timeout: float


@app.callback()
def main(
    ctx: typer.Context,
    api_key: str = typer.Option(
        None, "--api-key", "-k", help="Ollama API key (can also use OLLAMA_API_KEY env var)"
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Request timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Requires an API key from https://ollama.com for web search and fetch."""
    load_dotenv()
    _init_logging(verbose)
    ctx.obj = _CliState(api_key=api_key, timeout=timeout)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query"),
    max_results: int = typer.Option(
        None, "--max-results", "-m", min=1, help="Maximum number of search results to return"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output results as JSON"),
    preview: bool = typer.Option(False, "--preview", help="Open the results in a browser"),
) -> None:
    """Search the web."""
    from weavex.web.formatting import format_search_markdown, format_search_results

    with _web_client(ctx, max_results) as client:
        try:
            response = client.search(query)
        except WeavexError as exc:
            _fail(f"Search request failed: {exc}")

    if preview:
        _open_preview(format_search_markdown(response))
        typer.echo("🔍 Opened results in browser")
    else:
        typer.echo(format_search_results(response, as_json=json_output))


@app.command()
def fetch(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL to fetch"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output result as JSON"),
    preview: bool = typer.Option(False, "--preview", help="Open the page content in a browser"),
) -> None:
    """Fetch and parse a specific URL."""
    from weavex.web.formatting import format_fetch_response

    with _web_client(ctx) as client:
        try:
            response = client.fetch(url)
        except WeavexError as exc:
            _fail(f"Failed to fetch URL: {exc}")

    if preview:
        _open_preview(response.content)
        typer.echo("🌐 Opened result in browser")
    else:
        typer.echo(format_fetch_response(response, as_json=json_output))


@app.command()
def agent(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Question or task for the agent"),
    model: str = typer.Option(None, "--model", "-m", help="Local model to use [default: gpt-oss:20b]"),
    ollama_url: str = typer.Option(
        None, "--ollama-url", help="Chat server URL [default: http://localhost:11434]"
    ),
    provider: str = typer.Option(
        None, "--provider", help="Chat API flavour: ollama or openai [default: ollama]"
    ),
    max_iterations: int = typer.Option(50, "--max-iterations", min=1, help="Maximum agent iterations"),
    max_results: int = typer.Option(
        None, "--max-results", min=1, help="Default number of results per web search"
    ),
    show_thinking: bool = typer.Option(
        False,
        "--show-thinking",
        help="Show the model's reasoning, tool calls and intermediate responses.",
    ),
    disable_reasoning: bool = typer.Option(
        False, "--disable-reasoning", help="Disable model reasoning (thinking mode) for faster responses."
    ),
    strict_tools: bool = typer.Option(
        False, "--strict-tools", help="Abort when the model calls an unknown tool or passes bad arguments."
    ),
    transcript_path: Path = typer.Option(
        None, "--transcript", help="Write the full session transcript to this YAML file"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output the result as JSON"),
    preview: bool = typer.Option(False, "--preview", help="Open the final answer in a browser"),
) -> None:
    """Run an AI agent with web search capabilities."""
    from weavex.agent import Agent, build_web_tools
    from weavex.llm import get_chat_client

    try:
        chat_client = get_chat_client(provider=provider, model=model, base_url=ollama_url)
    except (ValueError, ImportError) as exc:
        _fail(str(exc))

    console = Console(stderr=True, quiet=json_output)
    console.print(f"🤖 Initializing agent with model: {chat_client.model}\n", markup=False)

    with closing(chat_client), _web_client(ctx, max_results) as client:
        runner = Agent(
            chat_client,
            build_web_tools(client),
            strict_tools=strict_tools,
            on_event=_print_event if show_thinking else None,
        )
        console.print(f"🔍 Researching: {query}\n", markup=False)
        try:
            if show_thinking or json_output:
                answer = runner.run(query, max_iterations, not disable_reasoning)
            else:
                with console.status("[cyan]🧵 Weaving...[/cyan]"):
                    answer = runner.run(query, max_iterations, not disable_reasoning)
        except AgentError as exc:
            _save_transcript(exc.session, transcript_path)
            _agent_failed(exc, json_output)
        except ValueError as exc:
            _fail(str(exc))

    _save_transcript(answer.session, transcript_path)
    if json_output:
        typer.echo(json.dumps(_agent_payload(answer.session, answer.content), indent=2))
    elif preview:
        _open_preview(answer.content)
        typer.echo("\n📝 Opened result in browser")
    else:
        typer.echo(f"\n📝 Final Answer:\n{answer.content}")


def run() -> None:
    app()


def _init_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("weavex").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _web_client(ctx: typer.Context, max_results: int | None = None):
    from weavex.web.client import WebClient

    state: _CliState = ctx.obj
    try:
        config = (
            WebConfig.from_env(api_key=state.api_key)
            .with_timeout(state.timeout)
            .with_max_results(max_results)
        )
    except WeavexError as exc:
        _fail(str(exc))
    return WebClient(config)


def _open_preview(markdown: str) -> None:
    from weavex.preview import open_markdown_in_browser

    try:
        open_markdown_in_browser(markdown)
    except WeavexError as exc:
        _fail(str(exc))


def _fail(message: str, code: int = EXIT_ERROR):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code)


def _print_event(event) -> None:
    from weavex.agent import AgentEventType

    if event.type == AgentEventType.thinking:
        typer.echo("\n🧠 Reasoning:")
        typer.echo("   " + event.text.replace("\n", "\n   "))
    elif event.type == AgentEventType.content:
        typer.echo("\n💬 Response:")
        typer.echo("   " + event.text.replace("\n", "\n   "))
    elif event.type == AgentEventType.tool_call:
        call = event.tool_call
        if call.name == "web_search":
            typer.echo(f"   🔎 Searching: {call.arguments.get('query', '')}...")
        elif call.name == "web_fetch":
            typer.echo(f"   🌐 Fetching: {call.arguments.get('url', '')}...")
        else:
            typer.echo(f"   🔧 Calling: {call.name}...")


def _agent_payload(session, content: str | None, error: str | None = None) -> dict:
    from weavex.utils.yaml_io import dump_transcript

    payload = {
        "session_id": session.session_id if session else None,
        "answer": content,
        "termination_reason": session.termination_reason.value if session else None,
        "iterations": session.iteration_count if session else 0,
        "transcript": dump_transcript(session.transcript) if session else [],
    }
    if error is not None:
        payload["error"] = error
    return payload


def _agent_failed(exc: AgentError, json_output: bool) -> None:
    code = EXIT_INCOMPLETE if exc.reason == TerminationReason.iteration_limit else EXIT_ERROR
    if json_output:
        typer.echo(json.dumps(_agent_payload(exc.session, None, error=str(exc)), indent=2))
        raise typer.Exit(code)
    if exc.reason == TerminationReason.iteration_limit:
        typer.echo(f"\n⚠️  {exc}", err=True)
        raise typer.Exit(code)
    _fail(f"Agent execution failed: {exc}", code)


def _save_transcript(session, path: Path | None) -> None:
    if path is None or session is None:
        return
    from weavex.utils.yaml_io import save_transcript

    save_transcript(session.transcript, path, session_id=session.session_id)
    typer.echo(f"Transcript written to {path}", err=True)


if __name__ == "__main__":
    app()
