"""
Pending/completed task bookkeeping for a single goal session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional


@dataclass
class TaskQueue:
    """
    FIFO queue of pending tasks plus the history of completed ones.

    The task being worked on stays at the head of ``pending`` until
    :meth:`complete` moves it to ``completed`` in one step, so a task is never
    held by the controller while absent from both lists.
    """

    pending: List[str] = field(default_factory=list)
    completed: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.pending

    def peek(self) -> Optional[str]:
        """返回队首任务，不出队。"""
        if not self.pending:
            return None
        return self.pending[0]

    def complete(self, task: str) -> None:
        """把队首任务移入已完成列表。"""
        if not self.pending or self.pending[0] != task:
            raise ValueError(f"Task {task!r} is not at the head of the pending queue.")
        self.pending.pop(0)
        self.completed.append(task)

    def extend(self, tasks: Iterable[str]) -> List[str]:
        """
        Append new tasks behind the pending ones and return those accepted.

        Blank tasks and tasks already completed are skipped. Tasks equal to
        one still pending are accepted: only the completed history filters.
        """
        added: List[str] = []
        for task in tasks:
            if not isinstance(task, str) or not task.strip():
                continue
            if task in self.completed:
                continue
            self.pending.append(task)
            added.append(task)
        return added

    def snapshot(self) -> List[str]:
        return list(self.pending)
