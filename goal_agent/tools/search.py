"""
Web search tool backed by the Serper Google Search API.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import requests

from ..config import ServerConfig, get_server_config
from ..core.agent.prompts import SUMMARIZE_SEARCH_PROMPT
from ..core.primitives.tools import SearchUnavailableError, ToolExecutionError, ToolResult
from ..llm import ModelHandle, create_model

if TYPE_CHECKING:
    from ..settings import ModelSettings


SERPER_ENDPOINT = "https://google.serper.dev/search"
NO_RESULT_TEXT = "No good Google Search Result was found"

ModelFactory = Callable[["ModelSettings"], ModelHandle]


def collect_snippets(body: Dict[str, Any], *, limit: int = 8) -> List[str]:
    snippets: List[str] = []
    knowledge_graph = body.get("knowledgeGraph") or {}
    if knowledge_graph.get("description"):
        snippets.append(str(knowledge_graph["description"]))
    for result in body.get("organic") or []:
        snippet = result.get("snippet")
        if snippet:
            snippets.append(str(snippet))
        if len(snippets) >= limit:
            break
    return snippets


class SerperSearch:
    """
    Searches Google through Serper and condenses the snippets with the model.

    A direct answer box short-circuits the summary step.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model_factory: Optional[ModelFactory] = None,
        timeout: float = 30.0,
        endpoint: str = SERPER_ENDPOINT,
    ) -> None:
        self.api_key = api_key
        self.model_factory = model_factory or create_model
        self.timeout = timeout
        self.endpoint = endpoint
        self._logger = logging.getLogger(__name__)

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def run(self, settings: "ModelSettings", goal: str, query: str) -> ToolResult:
        if not self.api_key:
            raise SearchUnavailableError("Search is unavailable: no SERP_API_KEY is configured.")
        body = self._fetch(query)
        try:
            answer_box = body.get("answerBox") or {}
            direct_answer = answer_box.get("answer") or answer_box.get("snippet")
            snippets = collect_snippets(body)
        except (AttributeError, TypeError) as exc:
            raise ToolExecutionError(f"Search returned a malformed body: {body}") from exc

        if direct_answer:
            return ToolResult(content=str(direct_answer), metadata={"query": query, "source": "answer_box"})

        if not snippets:
            return ToolResult(content=NO_RESULT_TEXT, metadata={"query": query, "snippets": []})

        prompt = SUMMARIZE_SEARCH_PROMPT.format(goal=goal, query=query, snippets=snippets)
        summary = self.model_factory(settings).complete(prompt)
        self._logger.info(
            "\n%s\n[SEARCH SUMMARY] %s\n%s\n%s",
            "-" * 80,
            query,
            summary.strip(),
            "-" * 80,
        )
        return ToolResult(content=summary, metadata={"query": query, "snippets": snippets})

    def search(self, settings: "ModelSettings", goal: str, query: str) -> str:
        return self.run(settings, goal, query).content

    def _fetch(self, query: str) -> Dict[str, Any]:
        headers = {"X-API-KEY": self.api_key, "Content-Type": "application/json"}
        try:
            response = requests.post(self.endpoint, json={"q": query}, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ToolExecutionError(f"Search request failed: {exc}") from exc
        if response.status_code >= 400:
            raise ToolExecutionError(f"Search request failed ({response.status_code}): {response.text}")
        try:
            return response.json()
        except ValueError as exc:
            raise ToolExecutionError(f"Search returned a non-JSON body: {response.text}") from exc


def search(
    settings: "ModelSettings",
    goal: str,
    query: str,
    *,
    config: Optional[ServerConfig] = None,
) -> str:
    """
    Search with the server's Serper key.

    Raises :class:`SearchUnavailableError` when no key is configured; an
    absent key is an expected configuration, not a failure of the search.
    """
    config = config or get_server_config()
    tool = SerperSearch(config.serp_api_key, model_factory=lambda s: create_model(s, config=config))
    return tool.search(settings, goal, query)
