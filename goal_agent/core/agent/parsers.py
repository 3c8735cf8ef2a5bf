"""
Parsers that turn free-form model output into task lists and analyses.

Parsing never raises on bad model output: each parser reports failure through
a :class:`ParseResult`, and the ``extract_*`` helpers substitute the fallback
value for their call site.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Generic, Iterator, List, Optional, Sequence, TypeVar

from ..primitives.analysis import ACTIONS, DEFAULT_ANALYSIS, ActionKind, Analysis


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)
_DECODER = json.JSONDecoder()

# Filler answers models give instead of an empty array.
_NO_TASK = re.compile(
    r"^No( (new|further|additional|extra|other))? tasks? (is |are )?(required|needed|added|created|inputted).*$",
    re.IGNORECASE,
)
_TASK_COMPLETE = re.compile(r"^Task (complete|completed|finished|done|over|success).*", re.IGNORECASE)
_DO_NOTHING = re.compile(r"^Do nothing(\s.*)?$", re.IGNORECASE)


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult[T]":
        return cls(error=error)


def _loads(text: str) -> ParseResult[Any]:
    # Pathologically nested output exhausts the decoder's recursion limit.
    try:
        return ParseResult.success(json.loads(text))
    except (ValueError, RecursionError) as exc:
        return ParseResult.failure(f"{type(exc).__name__}: {exc}")


def _loads_leading_array(text: str) -> ParseResult[Any]:
    """Decode the value starting at the first ``[``, ignoring whatever follows it."""
    start = text.find("[")
    if start < 0:
        return ParseResult.failure("no '[' in text")
    try:
        value, _ = _DECODER.raw_decode(text, start)
    except (ValueError, RecursionError) as exc:
        return ParseResult.failure(f"{type(exc).__name__}: {exc}")
    return ParseResult.success(value)


def _as_string_list(data: Any) -> ParseResult[List[str]]:
    if not isinstance(data, list):
        return ParseResult.failure(f"expected a JSON array, got {type(data).__name__}")
    return ParseResult.success([item for item in data if isinstance(item, str)])


def _recovery_attempts(text: str) -> Iterator[ParseResult[Any]]:
    fenced = _CODE_FENCE.search(text)
    if fenced:
        yield _loads(fenced.group(1).strip())
    yield _loads_leading_array(text)


def parse_task_array(text: str) -> ParseResult[List[str]]:
    """
    Parse a JSON array of task strings, recovering from common wrapping noise.

    Strict parsing is tried first; after that code fences and surrounding
    prose (including a trailing period) are stripped and parsing retried.
    """
    stripped = (text or "").strip()
    strict = _loads(stripped)
    if strict.ok:
        return _as_string_list(strict.value)
    for recovered in _recovery_attempts(stripped):
        if recovered.ok:
            result = _as_string_list(recovered.value)
            if result.ok:
                return result
    return ParseResult.failure(f"no JSON array found: {strict.error}")


def is_real_task(task: str) -> bool:
    stripped = task.strip()
    if not stripped:
        return False
    return not (_NO_TASK.match(stripped) or _TASK_COMPLETE.match(stripped) or _DO_NOTHING.match(stripped))


def extract_tasks(text: str, completed_tasks: Sequence[str]) -> List[str]:
    """
    Return the new tasks proposed in ``text``, in order.

    Malformed output yields an empty list. Blank and filler entries, and
    entries matching a completed task exactly, are removed.
    """
    result = parse_task_array(text)
    if not result.ok:
        LOGGER.warning("Could not parse task list (%s); treating as no new tasks. Raw output: %s", result.error, text)
        return []
    completed = set(completed_tasks or ())
    return [task for task in result.value if is_real_task(task) and task not in completed]


def parse_analysis(text: str) -> ParseResult[Analysis]:
    parsed = _loads((text or "").strip())
    if not parsed.ok:
        return ParseResult.failure(parsed.error)
    data = parsed.value
    if not isinstance(data, dict):
        return ParseResult.failure(f"expected a JSON object, got {type(data).__name__}")
    action = data.get("action")
    arg = data.get("arg")
    if action not in ACTIONS:
        return ParseResult.failure(f"unknown action {action!r}")
    if not isinstance(arg, str):
        return ParseResult.failure("missing string 'arg'")
    return ParseResult.success(Analysis(action=ActionKind(action), arg=arg))


def extract_analysis(text: str) -> Analysis:
    """Parse an analysis, falling back to :data:`DEFAULT_ANALYSIS`."""
    result = parse_analysis(text)
    if not result.ok:
        LOGGER.warning("Error parsing analysis (%s); defaulting to reason. Raw output: %s", result.error, text)
        return DEFAULT_ANALYSIS
    return result.value
