"""
Core primitives and orchestration that compose the goal agent.
"""

from .agent import AgentController, AgentRunResult, AgentService, AgentState
from .primitives import Analysis, TaskQueue

__all__ = [
    "AgentController",
    "AgentRunResult",
    "AgentService",
    "AgentState",
    "Analysis",
    "TaskQueue",
]
