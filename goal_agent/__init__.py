"""
High-level exports for the autonomous goal agent.

A goal is decomposed into tasks by a language model; each task is analyzed
(reason or search), executed, and used to plan follow-up tasks until the queue
drains or the loop limit is reached.
"""

from .config import ServerConfig, get_server_config
from .settings import InvalidSettingsError, ModelSettings, validate_settings
from .llm import LLMError, ModelHandle, ProviderKind, create_model
from .core.agent import (
    AgentController,
    AgentRunResult,
    AgentService,
    AgentState,
    LLMAgentService,
    MockAgentService,
    create_agent_service,
    extract_tasks,
)
from .core.primitives import Analysis, TaskQueue
from .tools import SerperSearch, search

__all__ = [
    "ServerConfig",
    "get_server_config",
    "InvalidSettingsError",
    "ModelSettings",
    "validate_settings",
    "LLMError",
    "ModelHandle",
    "ProviderKind",
    "create_model",
    "AgentController",
    "AgentRunResult",
    "AgentService",
    "AgentState",
    "LLMAgentService",
    "MockAgentService",
    "create_agent_service",
    "extract_tasks",
    "Analysis",
    "TaskQueue",
    "SerperSearch",
    "search",
]
