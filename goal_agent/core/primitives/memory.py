"""
In-memory transcript of a goal session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class MessageType(str, Enum):
    """Kinds of entries a session emits while it runs."""

    GOAL = "goal"
    TASK = "task"
    THINKING = "thinking"
    ACTION = "action"
    SYSTEM = "system"
    ERROR = "error"


@dataclass
class AgentMessage:
    type: MessageType
    value: str
    info: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type.value, "value": self.value}
        if self.info:
            payload["info"] = self.info
        if self.metadata:
            payload["metadata"] = dict(self.metadata)
        return payload


@dataclass
class RunLog:
    """
    Ordered transcript of what one goal session emitted.
    """

    messages: List[AgentMessage] = field(default_factory=list)

    def append(self, message: AgentMessage) -> None:
        """记录一条会话消息。"""
        self.messages.append(message)

    def snapshot(self) -> List[AgentMessage]:
        """按顺序复制一份会话记录。"""
        return list(self.messages)
