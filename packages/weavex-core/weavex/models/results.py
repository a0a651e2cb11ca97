"""Agent run states and termination reasons."""

from __future__ import annotations

from enum import Enum


class AgentState(str, Enum):
    running = "running"
    awaiting_model = "awaiting_model"
    executing_tools = "executing_tools"
    finalized = "finalized"
    aborted = "aborted"


class TerminationReason(str, Enum):
    final_answer = "final_answer"
    iteration_limit = "iteration_limit"
    fatal_error = "fatal_error"


TERMINAL_STATES = frozenset({AgentState.finalized, AgentState.aborted})
