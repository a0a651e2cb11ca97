"""Tests for the chat client adapters and provider selection."""

from __future__ import annotations

import json

import httpx
import pytest

from weavex.agent import Agent, build_web_tools
from weavex.errors import AgentError, ApiError, MalformedResponse, ModelConnectionError
from weavex.llm import ChatClient, get_chat_client
from weavex.llm._base import build_tool_calls
from weavex.llm._config import get_model, get_ollama_host, get_provider
from weavex.llm._ollama import OllamaChatClient, encode_message
from weavex.models.messages import (
    AssistantMessage,
    SystemMessage,
    ToolCall,
    ToolMessage,
    ToolSchema,
    UserMessage,
)
from weavex.models.results import AgentState, TerminationReason
from tests.conftest import FakeWebClient

TOOLS = [ToolSchema(name="web_search", description="Search", parameters={"type": "object"})]
MESSAGES = [SystemMessage(content="sys"), UserMessage(content="question")]


def _ollama(handler, **kwargs) -> OllamaChatClient:
    return OllamaChatClient(
        "qwen3:14b", base_url="http://ollama.test", transport=httpx.MockTransport(handler), **kwargs
    )


def _chat_body(message: dict) -> dict:
    return {"model": "qwen3:14b", "message": {"role": "assistant", **message}, "done": True}


# --- Ollama ---

class TestOllamaChatClient:
    def test_request_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_chat_body({"content": "hi"}))

        _ollama(handler).send(MESSAGES, TOOLS, reasoning_enabled=True)

        assert seen["url"] == "http://ollama.test/api/chat"
        body = seen["body"]
        assert body["model"] == "qwen3:14b"
        assert body["stream"] is False
        assert body["think"] is True
        assert body["tools"] == [t.to_wire() for t in TOOLS]
        assert body["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "question"},
        ]

    def test_reasoning_disabled_omits_think(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_chat_body({"content": "hi"}))

        _ollama(handler).send(MESSAGES, [], reasoning_enabled=False)
        assert "think" not in seen["body"]
        assert "tools" not in seen["body"]

    def test_final_answer(self):
        client = _ollama(lambda r: httpx.Response(200, json=_chat_body({"content": "42", "thinking": "math"})))
        turn = client.send(MESSAGES, TOOLS)
        assert turn.content == "42"
        assert turn.thinking == "math"
        assert not turn.has_tool_calls

    def test_tool_calls_get_ids(self):
        body = _chat_body({
            "content": "",
            "tool_calls": [
                {"function": {"name": "web_search", "arguments": {"query": "rust"}}},
                {"function": {"name": "web_fetch", "arguments": '{"url": "https://x"}'}},
            ],
        })
        turn = _ollama(lambda r: httpx.Response(200, json=body)).send(MESSAGES, TOOLS)
        assert [(c.id, c.name, c.arguments) for c in turn.tool_calls] == [
            ("call_0", "web_search", {"query": "rust"}),
            ("call_1", "web_fetch", {"url": "https://x"}),
        ]

    def test_server_ids_kept(self):
        body = _chat_body({"tool_calls": [{"id": "abc", "function": {"name": "web_search", "arguments": {}}}]})
        turn = _ollama(lambda r: httpx.Response(200, json=body)).send(MESSAGES, TOOLS)
        assert turn.tool_calls[0].id == "abc"

    def test_null_content(self):
        turn = _ollama(lambda r: httpx.Response(200, json=_chat_body({"content": None}))).send(MESSAGES, TOOLS)
        assert turn.content == ""

    def test_api_error_verbatim(self):
        client = _ollama(lambda r: httpx.Response(404, text='{"error":"model not found"}'))
        with pytest.raises(ApiError) as exc_info:
            client.send(MESSAGES, TOOLS)
        assert exc_info.value.status == 404
        assert exc_info.value.message == '{"error":"model not found"}'

    def test_invalid_json(self):
        client = _ollama(lambda r: httpx.Response(200, text="not json"))
        with pytest.raises(MalformedResponse):
            client.send(MESSAGES, TOOLS)

    def test_invalid_utf8_body(self):
        client = _ollama(lambda r: httpx.Response(200, content=b'{"message": "\xff\xfe"}'))
        with pytest.raises(MalformedResponse, match="Failed to parse chat response"):
            client.send(MESSAGES, TOOLS)

    def test_undecodable_body_aborts_agent_run(self):
        client = _ollama(lambda r: httpx.Response(200, content=b"\xff"))
        agent = Agent(client, build_web_tools(FakeWebClient()))
        with pytest.raises(AgentError) as exc_info:
            agent.run("q", max_iterations=3)
        assert exc_info.value.reason == TerminationReason.fatal_error
        assert exc_info.value.session.state == AgentState.aborted
        assert isinstance(exc_info.value.__cause__, MalformedResponse)

    def test_missing_message(self):
        client = _ollama(lambda r: httpx.Response(200, json={"done": True}))
        with pytest.raises(MalformedResponse, match="Failed to parse chat response"):
            client.send(MESSAGES, TOOLS)

    def test_bad_tool_arguments(self):
        body = _chat_body({"tool_calls": [{"function": {"name": "web_search", "arguments": "{oops"}}]})
        with pytest.raises(MalformedResponse):
            _ollama(lambda r: httpx.Response(200, json=body)).send(MESSAGES, TOOLS)

    @pytest.mark.parametrize("exc", [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")])
    def test_transport_failures(self, exc):
        def handler(request):
            raise exc

        with pytest.raises(ModelConnectionError, match="http://ollama.test"):
            _ollama(handler).send(MESSAGES, TOOLS)

    def test_satisfies_protocol(self):
        assert isinstance(_ollama(lambda r: httpx.Response(200)), ChatClient)


class TestEncodeMessage:
    def test_assistant_drops_thinking(self):
        msg = AssistantMessage(
            content="",
            thinking="secret",
            tool_calls=[ToolCall(id="call_0", name="web_search", arguments={"query": "q"})],
        )
        assert encode_message(msg) == {
            "role": "assistant",
            "content": "",
            "tool_calls": [{"id": "call_0", "function": {"name": "web_search", "arguments": {"query": "q"}}}],
        }

    def test_plain_assistant(self):
        assert encode_message(AssistantMessage(content="done")) == {"role": "assistant", "content": "done"}

    def test_tool_message(self):
        msg = ToolMessage(tool_call_id="call_0", tool_name="web_search", content="r", truncated=True)
        assert encode_message(msg) == {
            "role": "tool",
            "content": "r",
            "tool_name": "web_search",
            "tool_call_id": "call_0",
        }


class TestBuildToolCalls:
    def test_duplicate_ids_replaced(self):
        calls = build_tool_calls([("x", "a", {}), ("x", "b", {}), (None, "c", {})])
        ids = [c.id for c in calls]
        assert ids[0] == "x"
        assert len(set(ids)) == 3

    def test_fallback_skips_taken_ids(self):
        calls = build_tool_calls([("call_1", "a", {}), (None, "b", {})])
        assert [c.id for c in calls] == ["call_1", "call_2"]


# --- Provider selection ---

class TestConfig:
    def test_provider_default(self, monkeypatch):
        monkeypatch.delenv("WEAVEX_CHAT_PROVIDER", raising=False)
        assert get_provider() == "ollama"

    def test_provider_from_env(self, monkeypatch):
        monkeypatch.setenv("WEAVEX_CHAT_PROVIDER", "OpenAI")
        assert get_provider() == "openai"

    def test_provider_invalid(self, monkeypatch):
        monkeypatch.setenv("WEAVEX_CHAT_PROVIDER", "gemini")
        with pytest.raises(ValueError, match="Unsupported"):
            get_provider()

    def test_model_default(self, monkeypatch):
        monkeypatch.delenv("WEAVEX_MODEL", raising=False)
        assert get_model() == "gpt-oss:20b"

    def test_model_override(self, monkeypatch):
        monkeypatch.setenv("WEAVEX_MODEL", "qwen3:14b")
        assert get_model() == "qwen3:14b"

    def test_ollama_host(self, monkeypatch):
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        assert get_ollama_host() == "http://localhost:11434"
        monkeypatch.setenv("OLLAMA_HOST", "0.0.0.0:11434")
        assert get_ollama_host() == "http://0.0.0.0:11434"


class TestGetChatClient:
    def test_ollama(self, monkeypatch):
        monkeypatch.delenv("WEAVEX_CHAT_PROVIDER", raising=False)
        client = get_chat_client(model="llama3.1", base_url="http://box:11434/")
        assert isinstance(client, OllamaChatClient)
        assert client.model == "llama3.1"
        assert client.base_url == "http://box:11434"

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_chat_client(provider="gemini")
