"""
Agent services: the four model-backed operations the controller drives.

The controller only depends on :class:`AgentService`; the live and mock
implementations below are interchangeable.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from ...config import ServerConfig, get_server_config
from ...llm import ModelHandle, create_model
from ..primitives.analysis import ACTIONS, ActionKind, Analysis
from ..primitives.tools import SearchUnavailableError
from .parsers import extract_analysis, extract_tasks
from .prompts import ANALYZE_TASK_PROMPT, CREATE_TASKS_PROMPT, EXECUTE_TASK_PROMPT, START_GOAL_PROMPT

if TYPE_CHECKING:
    from ...settings import ModelSettings
    from ...tools.search import SerperSearch


LOGGER = logging.getLogger(__name__)

SEARCH_UNAVAILABLE_NOTICE = "`ERROR: Failed to search as no SERP_API_KEY is provided in ENV.`"

ModelFactory = Callable[["ModelSettings"], ModelHandle]


class AgentService(ABC):
    @abstractmethod
    def start_goal(self, settings: "ModelSettings", goal: str, language: Optional[str] = None) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def analyze_task(self, settings: "ModelSettings", goal: str, task: str) -> Analysis:
        raise NotImplementedError

    @abstractmethod
    def execute_task(
        self,
        settings: "ModelSettings",
        goal: str,
        task: str,
        analysis: Analysis,
        language: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    @abstractmethod
    def create_tasks(
        self,
        settings: "ModelSettings",
        goal: str,
        tasks: Sequence[str],
        last_task: str,
        result: str,
        completed_tasks: Optional[Sequence[str]] = None,
        language: Optional[str] = None,
    ) -> List[str]:
        raise NotImplementedError


class LLMAgentService(AgentService):
    """
    Provider-backed implementation: one completion per operation.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        *,
        model_factory: Optional[ModelFactory] = None,
        search_tool: Optional["SerperSearch"] = None,
    ) -> None:
        self.config = config or get_server_config()
        self.model_factory = model_factory or (lambda settings: create_model(settings, config=self.config))
        if search_tool is None:
            from ...tools.search import SerperSearch

            search_tool = SerperSearch(
                self.config.serp_api_key,
                model_factory=self.model_factory,
                timeout=self.config.request_timeout,
            )
        self.search_tool = search_tool

    def _complete(self, settings: "ModelSettings", prompt: str) -> str:
        # Handles are stateless, so a fresh one per call picks up a fresh server key.
        return self.model_factory(settings).complete(prompt)

    def start_goal(self, settings: "ModelSettings", goal: str, language: Optional[str] = None) -> List[str]:
        prompt = START_GOAL_PROMPT.format(goal=goal, language=language or settings.resolved_language())
        completion = self._complete(settings, prompt)
        LOGGER.info("Goal %s completion: %s", goal, completion)
        return extract_tasks(completion, [])

    def analyze_task(self, settings: "ModelSettings", goal: str, task: str) -> Analysis:
        prompt = ANALYZE_TASK_PROMPT.format(goal=goal, actions=list(ACTIONS), task=task)
        completion = self._complete(settings, prompt)
        LOGGER.info("Analysis completion:\n%s", completion)
        return extract_analysis(completion)

    def execute_task(
        self,
        settings: "ModelSettings",
        goal: str,
        task: str,
        analysis: Analysis,
        language: Optional[str] = None,
    ) -> str:
        LOGGER.info("Execution analysis: %s", analysis.to_dict())
        if analysis.is_search:
            try:
                return self.search_tool.search(settings, goal, analysis.arg)
            except SearchUnavailableError:
                LOGGER.warning("Search requested for task %r but no search key is configured.", task)
                completion = self._execute_with_model(settings, goal, task, language)
                return f"{SEARCH_UNAVAILABLE_NOTICE} \n\n{completion}"
        return self._execute_with_model(settings, goal, task, language)

    def _execute_with_model(
        self,
        settings: "ModelSettings",
        goal: str,
        task: str,
        language: Optional[str],
    ) -> str:
        prompt = EXECUTE_TASK_PROMPT.format(goal=goal, task=task, language=language or settings.resolved_language())
        return self._complete(settings, prompt)

    def create_tasks(
        self,
        settings: "ModelSettings",
        goal: str,
        tasks: Sequence[str],
        last_task: str,
        result: str,
        completed_tasks: Optional[Sequence[str]] = None,
        language: Optional[str] = None,
    ) -> List[str]:
        prompt = CREATE_TASKS_PROMPT.format(
            goal=goal,
            tasks=list(tasks),
            last_task=last_task,
            result=result,
            language=language or settings.resolved_language(),
        )
        completion = self._complete(settings, prompt)
        return extract_tasks(completion, completed_tasks or [])


class MockAgentService(AgentService):
    """
    Deterministic stand-in used for demos and offline runs.
    """

    def start_goal(self, settings: "ModelSettings", goal: str, language: Optional[str] = None) -> List[str]:
        return ["Task 1"]

    def analyze_task(self, settings: "ModelSettings", goal: str, task: str) -> Analysis:
        return Analysis(action=ActionKind.REASON, arg="Mock analysis")

    def execute_task(
        self,
        settings: "ModelSettings",
        goal: str,
        task: str,
        analysis: Analysis,
        language: Optional[str] = None,
    ) -> str:
        return "Result: " + task

    def create_tasks(
        self,
        settings: "ModelSettings",
        goal: str,
        tasks: Sequence[str],
        last_task: str,
        result: str,
        completed_tasks: Optional[Sequence[str]] = None,
        language: Optional[str] = None,
    ) -> List[str]:
        return ["Task 4"]


def create_agent_service(config: Optional[ServerConfig] = None) -> AgentService:
    """Return the mock service in mock mode and the live one otherwise."""
    config = config or get_server_config()
    if config.mock_mode:
        LOGGER.info("Mock mode enabled; using canned agent responses.")
        return MockAgentService()
    return LLMAgentService(config)
