"""
Goal-loop orchestration components (prompts, parsing, services, controller).
"""

from .prompts import (
    ANALYZE_TASK_PROMPT,
    CREATE_TASKS_PROMPT,
    EXECUTE_TASK_PROMPT,
    START_GOAL_PROMPT,
    SUMMARIZE_SEARCH_PROMPT,
    PromptTemplate,
)
from .parsers import ParseResult, extract_analysis, extract_tasks, parse_analysis, parse_task_array
from .service import AgentService, LLMAgentService, MockAgentService, create_agent_service
from .controller import (
    AgentController,
    AgentRunResult,
    AgentState,
    ControllerConfig,
    PhaseFailedError,
    PhaseFailure,
    TaskOutcome,
)

__all__ = [
    "ANALYZE_TASK_PROMPT",
    "CREATE_TASKS_PROMPT",
    "EXECUTE_TASK_PROMPT",
    "START_GOAL_PROMPT",
    "SUMMARIZE_SEARCH_PROMPT",
    "PromptTemplate",
    "ParseResult",
    "extract_analysis",
    "extract_tasks",
    "parse_analysis",
    "parse_task_array",
    "AgentService",
    "LLMAgentService",
    "MockAgentService",
    "create_agent_service",
    "AgentController",
    "AgentRunResult",
    "AgentState",
    "ControllerConfig",
    "PhaseFailedError",
    "PhaseFailure",
    "TaskOutcome",
]
