"""
Foundational data structures shared across the agent.
"""

from .analysis import ACTIONS, DEFAULT_ANALYSIS, ActionKind, Analysis
from .memory import AgentMessage, MessageType, RunLog
from .messages import ChatMessage, MessageRole, coerce_messages, user_message
from .tasks import TaskQueue
from .tools import SearchUnavailableError, ToolExecutionError, ToolResult

__all__ = [
    "ACTIONS",
    "DEFAULT_ANALYSIS",
    "ActionKind",
    "Analysis",
    "AgentMessage",
    "MessageType",
    "RunLog",
    "ChatMessage",
    "MessageRole",
    "coerce_messages",
    "user_message",
    "TaskQueue",
    "SearchUnavailableError",
    "ToolExecutionError",
    "ToolResult",
]
