"""
Prompt templates for each phase of the goal loop.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from string import Formatter
from textwrap import dedent
from typing import Any, FrozenSet, Tuple


@dataclass(frozen=True)
class PromptTemplate:
    """
    A prompt with named ``{placeholders}``, rendered by plain substitution.

    Literal braces are written doubled (``{{`` / ``}}``). Sequence values are
    rendered as JSON arrays so the model sees the same shape it must return.
    """

    template: str
    input_variables: Tuple[str, ...]

    def __post_init__(self) -> None:
        found = self.placeholders
        declared = frozenset(self.input_variables)
        if found != declared:
            raise ValueError(
                f"Template placeholders {sorted(found)} do not match input variables {sorted(declared)}."
            )

    @property
    def placeholders(self) -> FrozenSet[str]:
        return frozenset(name for _, name, _, _ in Formatter().parse(self.template) if name)

    def format(self, **values: Any) -> str:
        missing = [name for name in self.input_variables if name not in values]
        if missing:
            raise ValueError(f"Missing prompt variables: {', '.join(missing)}")
        unexpected = [name for name in values if name not in self.input_variables]
        if unexpected:
            raise ValueError(f"Unexpected prompt variables: {', '.join(unexpected)}")
        rendered = {name: _render_value(value) for name, value in values.items()}
        return self.template.format(**rendered)


def _render_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False)
    return str(value)


def _template(text: str) -> str:
    return " ".join(dedent(text).split())


START_GOAL_PROMPT = PromptTemplate(
    template=_template(
        """
        You are a task creation AI called GoalAgent. You must answer in the "{language}" language.
        You are not a part of any system or device. You have the following objective "{goal}".
        Create a list of zero to three tasks to be completed by your AI system such that this goal
        is more closely, or completely reached. You have access to google search for tasks that
        require current events or small searches. Return the response as a formatted ARRAY of
        strings that can be used in JSON.parse() and NOTHING ELSE. Example: ["TASK-1", "TASK-2"].
        """
    ),
    input_variables=("goal", "language"),
)

ANALYZE_TASK_PROMPT = PromptTemplate(
    template=_template(
        """
        You have the following higher level objective "{goal}". You currently are focusing on the
        following task: "{task}". Based on this information, evaluate what the best action to take
        is strictly from the list of actions: {actions}. You should use 'search' only for research
        about current events where "arg" is a simple clear search query based on the task only.
        Use "reason" for all other actions. Return the response as an object of the form
        {{ "action": "string", "arg": "string" }} that can be used in JSON.parse() and NOTHING ELSE.
        """
    ),
    input_variables=("goal", "actions", "task"),
)

EXECUTE_TASK_PROMPT = PromptTemplate(
    template=_template(
        """
        Answer in the "{language}" language. Given the following overall objective `{goal}` and the
        following sub-task, `{task}`. Perform the task in a detailed manner. If coding is required,
        provide code in markdown.
        """
    ),
    input_variables=("goal", "task", "language"),
)

CREATE_TASKS_PROMPT = PromptTemplate(
    template=_template(
        """
        You are an AI task creation agent. You must answer in the "{language}" language. You have
        the following objective `{goal}`. You have the following incomplete tasks `{tasks}` and have
        just executed the following task `{last_task}` and received the following result `{result}`.
        Based on this, create a new task to be completed by your AI system ONLY IF NEEDED such that
        your goal is more closely reached or completely reached. Return the response as an array of
        strings that can be used in JSON.parse() and NOTHING ELSE.
        """
    ),
    input_variables=("goal", "tasks", "last_task", "result", "language"),
)

SUMMARIZE_SEARCH_PROMPT = PromptTemplate(
    template=_template(
        """
        Summarize the following snippets "{snippets}" from google search results filling in
        information where necessary. This summary should answer the following query: "{query}"
        with the following goal "{goal}" in mind. Return the summary as a string. Do not show you
        are summarizing.
        """
    ),
    input_variables=("goal", "query", "snippets"),
)
