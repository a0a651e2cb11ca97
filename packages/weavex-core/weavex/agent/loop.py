"""Agent loop — drive the model through tool-calling rounds until it answers.

One round::

    Running ──► AwaitingModel ──(no tool calls)──► Finalized
                     │
                (tool calls)
                     ▼
               ExecutingTools ──(iteration_count >= max)──► Aborted
                     │
                     └──► Running (next round)

A chat failure in ``AwaitingModel`` moves straight to ``Aborted``.  Tool
calls of one turn run one after another in the order the model emitted
them, and every call gets exactly one result message, even when it fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from weavex.agent._prompts import render_system_prompt
from weavex.agent.context import DEFAULT_RESULT_LIMIT, truncate
from weavex.agent.session import AgentSession, FinalAnswer
from weavex.agent.tools import ToolRegistry
from weavex.errors import (
    FATAL_CHAT_ERRORS,
    AgentError,
    InvalidArguments,
    ToolError,
    UnknownTool,
)
from weavex.llm._base import ChatClient
from weavex.models.messages import (
    AssistantTurn,
    SystemMessage,
    ToolCall,
    ToolMessage,
    ToolResult,
    UserMessage,
)
from weavex.models.results import AgentState, TerminationReason

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50


class AgentEventType(str, Enum):
    thinking = "thinking"
    content = "content"
    tool_call = "tool_call"
    tool_result = "tool_result"


@dataclass(frozen=True)
class AgentEvent:
    """Progress notification emitted while the loop runs."""

    type: AgentEventType
    iteration: int
    text: str = ""
    tool_call: ToolCall | None = None
    result: ToolResult | None = None


EventCallback = Callable[[AgentEvent], None]


class Agent:
    """Tool-calling research agent.

    Example::

        registry = build_web_tools(WebClient(WebConfig.from_env()))
        agent = Agent(OllamaChatClient("qwen3:14b"), registry)
        answer = agent.run("latest rust async runtime benchmarks", max_iterations=10)
        print(answer.content)

    Args:
        chat_client: Adapter for the local model's chat endpoint.
        registry: Tools the model may call.
        result_limit: Character budget for each tool result.
        strict_tools: Abort the run when the model calls an unknown tool or
            passes invalid arguments, instead of reporting the error back.
        system_prompt: Replaces the default system instruction.
        on_event: Called with an ``AgentEvent`` for reasoning, content,
            tool calls and tool results as they happen.
    """

    def __init__(
        self,
        chat_client: ChatClient,
        registry: ToolRegistry,
        *,
        result_limit: int = DEFAULT_RESULT_LIMIT,
        strict_tools: bool = False,
        system_prompt: str | None = None,
        on_event: EventCallback | None = None,
    ) -> None:
        if result_limit < 0:
            raise ValueError(f"result_limit must be non-negative, got {result_limit}")
        self._chat = chat_client
        self._registry = registry
        self._result_limit = result_limit
        self._strict_tools = strict_tools
        self._system_prompt = system_prompt
        self._on_event = on_event

    def start_session(
        self,
        query: str,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        reasoning_enabled: bool = True,
    ) -> AgentSession:
        """Create a session seeded with the system instruction and *query*."""
        session = AgentSession(max_iterations=max_iterations, reasoning_enabled=reasoning_enabled)
        system = self._system_prompt or render_system_prompt(self._registry.describe())
        session.transcript.append(SystemMessage(content=system))
        session.transcript.append(UserMessage(content=query))
        return session

    def run(
        self,
        query: str,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        reasoning_enabled: bool = True,
    ) -> FinalAnswer:
        """Research *query* until the model answers.

        Raises:
            AgentError: With ``reason`` ``iteration_limit`` when the model was
                still calling tools after *max_iterations* rounds, or
                ``fatal_error`` when the chat endpoint failed.
            ValueError: If *max_iterations* is less than 1.
        """
        session = self.start_session(query, max_iterations, reasoning_enabled)
        logger.info("Starting agent session %s with query: %s", session.session_id, query)
        tools = self._registry.describe()

        while True:
            session.transition(AgentState.awaiting_model)
            session.iteration_count += 1
            logger.info("Agent iteration %d/%d", session.iteration_count, session.max_iterations)

            try:
                turn = self._chat.send(session.transcript.messages, tools, reasoning_enabled)
            except FATAL_CHAT_ERRORS as exc:
                session.abort(TerminationReason.fatal_error)
                logger.error("Chat request failed: %s", exc)
                raise AgentError(
                    f"Chat request failed: {exc}", TerminationReason.fatal_error, session
                ) from exc

            self._report_turn(turn, session)
            session.transcript.append(turn.to_message(keep_thinking=reasoning_enabled))

            if not turn.has_tool_calls:
                logger.info("Agent completed without tool calls")
                session.finalize()
                return FinalAnswer(content=turn.content, session=session)

            session.transition(AgentState.executing_tools)
            logger.info("Model requested %d tool call(s)", len(turn.tool_calls))
            for call in turn.tool_calls:
                result = self._execute(call, session)
                session.transcript.append(
                    ToolMessage(
                        tool_call_id=result.tool_call_id,
                        tool_name=call.name,
                        content=result.content,
                        truncated=result.truncated,
                    )
                )

            if session.iteration_count >= session.max_iterations:
                session.abort(TerminationReason.iteration_limit)
                last_action = session.transcript.last_action()
                logger.warning(
                    "Agent reached max iterations (%d) while %s",
                    session.max_iterations,
                    last_action,
                )
                raise AgentError(
                    f"Reached maximum iterations ({session.max_iterations}) while "
                    f"{last_action}. Try a more specific query or use "
                    "--max-iterations to increase the limit.",
                    TerminationReason.iteration_limit,
                    session,
                )
            session.transition(AgentState.running)

    def _execute(self, call: ToolCall, session: AgentSession) -> ToolResult:
        """Run one tool call; failures become an ``Error: ...`` result."""
        self._emit(AgentEventType.tool_call, session, tool_call=call)
        try:
            output = self._registry.dispatch(call.name, call.arguments)
        except (UnknownTool, InvalidArguments) as exc:
            if self._strict_tools:
                session.abort(TerminationReason.fatal_error)
                raise AgentError(str(exc), TerminationReason.fatal_error, session) from exc
            logger.warning("Rejected tool call %s: %s", call.name, exc)
            output = f"Error: {exc}"
        except ToolError as exc:
            logger.warning("Tool %s failed: %s", call.name, exc)
            output = f"Error: {exc}"

        content, truncated = truncate(output, self._result_limit)
        logger.info("Tool %s executed, result length: %d chars", call.name, len(output))
        result = ToolResult(tool_call_id=call.id, content=content, truncated=truncated)
        self._emit(AgentEventType.tool_result, session, tool_call=call, result=result)
        return result

    def _report_turn(self, turn: AssistantTurn, session: AgentSession) -> None:
        if turn.thinking and session.reasoning_enabled:
            logger.info("Model thinking: %s", turn.thinking[:100])
            self._emit(AgentEventType.thinking, session, text=turn.thinking)
        if turn.content:
            logger.info("Model response: %s", turn.content[:100])
            self._emit(AgentEventType.content, session, text=turn.content)

    def _emit(self, type_: AgentEventType, session: AgentSession, **fields) -> None:
        if self._on_event is not None:
            self._on_event(AgentEvent(type=type_, iteration=session.iteration_count, **fields))
