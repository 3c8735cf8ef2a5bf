"""
Result and error types for external tools invoked by the agent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


class ToolExecutionError(RuntimeError):
    """Raised when a tool invocation fails."""


class SearchUnavailableError(ToolExecutionError):
    """Raised when the search capability has no credential configured."""


@dataclass
class ToolResult:
    """Structured response produced by a tool."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
