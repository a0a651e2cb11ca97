"""Run state for one agent invocation."""

from __future__ import annotations

from dataclasses import dataclass, field

from weavex.agent.context import Transcript
from weavex.models.messages import AssistantMessage, Message
from weavex.models.results import TERMINAL_STATES, AgentState, TerminationReason
from weavex.utils.ids import generate_session_id


@dataclass
class AgentSession:
    """Mutable state of a single ``Agent.run`` call.

    Only the agent loop writes to it.  It is discarded when the run returns.
    """

    max_iterations: int
    reasoning_enabled: bool = True
    transcript: Transcript = field(default_factory=Transcript)
    iteration_count: int = 0
    state: AgentState = AgentState.running
    termination_reason: TerminationReason | None = None
    session_id: str = field(default_factory=generate_session_id)

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")

    @property
    def terminated(self) -> bool:
        return self.state in TERMINAL_STATES

    def transition(self, state: AgentState) -> None:
        if self.terminated:
            raise RuntimeError(f"Session already terminated ({self.state.value})")
        self.state = state

    def finalize(self) -> None:
        self.transition(AgentState.finalized)
        self.termination_reason = TerminationReason.final_answer

    def abort(self, reason: TerminationReason) -> None:
        self.transition(AgentState.aborted)
        self.termination_reason = reason


@dataclass
class FinalAnswer:
    """Successful result of ``Agent.run``: the answer plus the full transcript."""

    content: str
    session: AgentSession

    @property
    def transcript(self) -> tuple[Message, ...]:
        return self.session.transcript.messages

    @property
    def iteration_count(self) -> int:
        return self.session.iteration_count

    @property
    def thinking(self) -> str | None:
        last = self.session.transcript.last_assistant()
        return last.thinking if isinstance(last, AssistantMessage) else None
