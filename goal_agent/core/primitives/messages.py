"""
Chat message primitives used by chat-style transports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class MessageRole(str, Enum):
    """Canonical chat roles accepted by chat completion endpoints."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ChatMessage:
    """
    Minimal representation of a chat message.

    The structure mirrors common OpenAI-compatible schemas and is easily
    serializable to JSON for request bodies.
    """

    role: MessageRole
    content: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        payload: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.name:
            payload["name"] = self.name
        return payload


def user_message(content: str) -> ChatMessage:
    return ChatMessage(role=MessageRole.USER, content=content)


def coerce_messages(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    """Convert a list of message objects into dictionaries."""
    return [message.to_dict() for message in messages]
