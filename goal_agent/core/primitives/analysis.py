"""
The reason/search decision taken before each task is executed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ActionKind(str, Enum):
    REASON = "reason"
    SEARCH = "search"


ACTIONS = tuple(kind.value for kind in ActionKind)


@dataclass(frozen=True)
class Analysis:
    """
    Chosen action for the current task and its argument.

    ``arg`` is a search query when ``action`` is ``search`` and free-form
    reasoning context otherwise.
    """

    action: ActionKind
    arg: str

    @property
    def is_search(self) -> bool:
        return self.action is ActionKind.SEARCH

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action.value, "arg": self.arg}


DEFAULT_ANALYSIS = Analysis(action=ActionKind.REASON, arg="Fallback due to parsing failure")
