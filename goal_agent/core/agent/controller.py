"""
Control loop that drives a goal session: decompose, then analyze, execute and
replan each task until the queue drains, the loop limit is hit, or the
caller stops the session.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence

from ...llm.base import LLMError, ProviderAuthError
from ...settings import validate_settings
from ..primitives.analysis import Analysis
from ..primitives.memory import AgentMessage, MessageType, RunLog
from ..primitives.tasks import TaskQueue
from ..primitives.tools import ToolExecutionError
from .service import AgentService

if TYPE_CHECKING:
    from ...settings import ModelSettings


class AgentState(str, Enum):
    IDLE = "idle"
    DECOMPOSING = "decomposing"
    ANALYZING = "analyzing"
    EXECUTING = "executing"
    REPLANNING = "replanning"
    DONE = "done"


class PhaseFailedError(RuntimeError):
    """Raised when a phase's model or tool call keeps failing."""

    def __init__(self, phase: AgentState, cause: Exception) -> None:
        super().__init__(f"{phase.value} failed: {cause}")
        self.phase = phase
        self.cause = cause


class _SessionStopped(Exception):
    pass


@dataclass
class ControllerConfig:
    phase_retries: int = 1


@dataclass(frozen=True)
class TaskOutcome:
    task: str
    analysis: Analysis
    result: str


@dataclass(frozen=True)
class PhaseFailure:
    phase: AgentState
    task: Optional[str]
    message: str
    auth_error: bool = False


@dataclass
class AgentRunResult:
    goal: str
    state: AgentState
    outcomes: List[TaskOutcome] = field(default_factory=list)
    pending: List[str] = field(default_factory=list)
    loop_count: int = 0
    cancelled: bool = False
    failure: Optional[PhaseFailure] = None
    messages: Sequence[AgentMessage] = field(default_factory=list)

    @property
    def completed_tasks(self) -> List[str]:
        return [outcome.task for outcome in self.outcomes]

    @property
    def succeeded(self) -> bool:
        return self.failure is None and not self.cancelled


MessageCallback = Callable[[AgentMessage], Any]


class AgentController:
    """
    Owns the task queue of one goal session and runs its phases serially.

    ``stop()`` may be called from another thread; it takes effect at the next
    phase boundary and never interrupts a call already in flight.
    """

    def __init__(
        self,
        service: AgentService,
        settings: "ModelSettings",
        *,
        config: Optional[ControllerConfig] = None,
        on_message: Optional[MessageCallback] = None,
    ) -> None:
        self.service = service
        self.settings = settings
        self.config = config or ControllerConfig()
        self.on_message = on_message
        self.queue = TaskQueue()
        self.log = RunLog()
        self.loop_count = 0
        self._state = AgentState.IDLE
        self._goal = ""
        self._analysis: Optional[Analysis] = None
        self._last_outcome: Optional[TaskOutcome] = None
        self._outcomes: List[TaskOutcome] = []
        self._failure: Optional[PhaseFailure] = None
        self._cancelled = False
        self._stop_event = threading.Event()
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def max_loops(self) -> int:
        return self.settings.resolved_max_loops()

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def run(self, goal: str) -> AgentRunResult:
        if self._state is not AgentState.IDLE:
            raise RuntimeError("This controller has already run; create a new one per goal.")
        goal = (goal or "").strip()
        if not goal:
            raise ValueError("Goal cannot be empty.")
        # Invalid settings must be rejected before any model call.
        validate_settings(self.settings)

        self._goal = goal
        self._emit(MessageType.GOAL, goal)
        self._logger.info(
            "\n%s\n[SESSION START]\nGoal: %s\nProvider: %s\nMax loops: %d\n%s",
            "=" * 80,
            goal,
            self.settings.provider.value,
            self.max_loops,
            "=" * 80,
        )
        self._transition(AgentState.DECOMPOSING)

        handlers = {
            AgentState.DECOMPOSING: self._decompose,
            AgentState.ANALYZING: self._analyze,
            AgentState.EXECUTING: self._execute,
            AgentState.REPLANNING: self._replan,
        }
        while self._state is not AgentState.DONE:
            try:
                if self.stopped:
                    raise _SessionStopped()
                handlers[self._state]()
            except _SessionStopped:
                self._finish_cancelled()
            except PhaseFailedError as exc:
                self._finish_failed(exc)
        return self._result()

    # ------------------------------------------------------------------ phases

    def _decompose(self) -> None:
        tasks = self._call_phase(
            self.service.start_goal,
            self.settings,
            self._goal,
            self.settings.resolved_language(),
        )
        for task in self.queue.extend(tasks):
            self._emit(MessageType.TASK, task)
        if self.queue.is_empty():
            self._emit(MessageType.SYSTEM, "No tasks were created for this goal.")
            self._transition(AgentState.DONE)
            return
        self._transition(AgentState.ANALYZING)

    def _analyze(self) -> None:
        task = self.queue.peek()
        self._analysis = self._call_phase(self.service.analyze_task, self.settings, self._goal, task)
        self._emit(
            MessageType.THINKING,
            f"{self._analysis.action.value}: {self._analysis.arg}",
            info=task,
        )
        self._transition(AgentState.EXECUTING)

    def _execute(self) -> None:
        task = self.queue.peek()
        result = self._call_phase(
            self.service.execute_task,
            self.settings,
            self._goal,
            task,
            self._analysis,
            self.settings.resolved_language(),
        )
        # Only a successful execution moves the task out of pending.
        self.queue.complete(task)
        outcome = TaskOutcome(task=task, analysis=self._analysis, result=result)
        self._outcomes.append(outcome)
        self._last_outcome = outcome
        self._analysis = None
        self._emit(MessageType.ACTION, result, info=f"Executing \"{task}\"")
        self._logger.info(
            "\n%s\n[TASK COMPLETE] %s\n%s\n%s",
            "-" * 80,
            task,
            result.strip(),
            "-" * 80,
        )
        self._transition(AgentState.REPLANNING)

    def _replan(self) -> None:
        outcome = self._last_outcome
        new_tasks = self._call_phase(
            self.service.create_tasks,
            self.settings,
            self._goal,
            self.queue.snapshot(),
            outcome.task,
            outcome.result,
            list(self.queue.completed),
            self.settings.resolved_language(),
        )
        for task in self.queue.extend(new_tasks):
            self._emit(MessageType.TASK, task)
        self.loop_count += 1

        if self.queue.is_empty():
            self._emit(MessageType.SYSTEM, "All tasks completed. Shutting down.")
            self._transition(AgentState.DONE)
        elif self.loop_count >= self.max_loops:
            self._emit(
                MessageType.SYSTEM,
                f"This agent has maxed out on loops ({self.max_loops}). Shutting down.",
            )
            self._transition(AgentState.DONE)
        else:
            self._transition(AgentState.ANALYZING)

    # ----------------------------------------------------------------- helpers

    def _call_phase(self, func: Callable[..., Any], *args: Any) -> Any:
        phase = self._state
        attempts = max(self.config.phase_retries, 0) + 1
        last_error: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            if attempt > 1 and self.stopped:
                raise _SessionStopped()
            try:
                return func(*args)
            except ProviderAuthError as exc:
                raise PhaseFailedError(phase, exc) from exc
            except (LLMError, ToolExecutionError) as exc:
                last_error = exc
                self._logger.warning(
                    "Phase %s failed (attempt %d/%d): %s",
                    phase.value,
                    attempt,
                    attempts,
                    exc,
                )
        raise PhaseFailedError(phase, last_error) from last_error

    def _transition(self, new_state: AgentState) -> None:
        self._logger.debug("State %s -> %s", self._state.value, new_state.value)
        self._state = new_state

    def _emit(self, message_type: MessageType, value: str, *, info: Optional[str] = None) -> None:
        message = AgentMessage(type=message_type, value=value, info=info)
        self.log.append(message)
        if self.on_message is not None:
            self.on_message(message)

    def _finish_cancelled(self) -> None:
        self._cancelled = True
        self._emit(MessageType.SYSTEM, "The agent has been stopped.")
        self._logger.info("Session stopped by caller during %s.", self._state.value)
        self._transition(AgentState.DONE)

    def _finish_failed(self, exc: PhaseFailedError) -> None:
        task = self.queue.peek() if exc.phase in (AgentState.ANALYZING, AgentState.EXECUTING) else None
        auth_error = isinstance(exc.cause, ProviderAuthError)
        self._failure = PhaseFailure(phase=exc.phase, task=task, message=str(exc.cause), auth_error=auth_error)
        self._emit(MessageType.ERROR, f"{exc.phase.value.capitalize()} failed: {exc.cause}", info=task)
        self._logger.error(
            "\n%s\n[PHASE FAILED] %s\nTask: %s\nError: %s\n%s",
            "=" * 80,
            exc.phase.value,
            task or "(none)",
            exc.cause,
            "=" * 80,
        )
        self._transition(AgentState.DONE)

    def _result(self) -> AgentRunResult:
        return AgentRunResult(
            goal=self._goal,
            state=self._state,
            outcomes=list(self._outcomes),
            pending=self.queue.snapshot(),
            loop_count=self.loop_count,
            cancelled=self._cancelled,
            failure=self._failure,
            messages=self.log.snapshot(),
        )
