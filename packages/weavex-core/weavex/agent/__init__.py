"""The tool-calling research agent."""

from weavex.agent.context import DEFAULT_RESULT_LIMIT, TRUNCATION_MARKER, Transcript, truncate
from weavex.agent.loop import Agent, AgentEvent, AgentEventType, DEFAULT_MAX_ITERATIONS
from weavex.agent.session import AgentSession, FinalAnswer
from weavex.agent.tools import ToolRegistry, build_web_tools

__all__ = [
    "Agent", "AgentEvent", "AgentEventType", "AgentSession", "FinalAnswer",
    "ToolRegistry", "Transcript", "build_web_tools", "truncate",
    "DEFAULT_MAX_ITERATIONS", "DEFAULT_RESULT_LIMIT", "TRUNCATION_MARKER",
]
