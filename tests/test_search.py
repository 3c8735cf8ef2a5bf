from unittest.mock import MagicMock, patch

import pytest
import requests

from goal_agent.config import ServerConfig
from goal_agent.core.primitives import SearchUnavailableError, ToolExecutionError
from goal_agent.settings import ModelSettings
from goal_agent.tools import NO_RESULT_TEXT, SerperSearch, collect_snippets, search
from goal_agent.tools.search import SERPER_ENDPOINT

POST = "goal_agent.tools.search.requests.post"
SETTINGS = ModelSettings()


def test_search_without_key_is_unavailable(fake_handle):
    tool = SerperSearch(None, model_factory=lambda s: fake_handle)
    assert not tool.available
    with patch(POST) as post:
        with pytest.raises(SearchUnavailableError):
            tool.search(SETTINGS, "Goal", "query")
    post.assert_not_called()


def test_answer_box_is_returned_directly(fake_handle, http_response):
    tool = SerperSearch("serp-key", model_factory=lambda s: fake_handle)
    body = {"answerBox": {"answer": "42"}, "organic": [{"snippet": "ignored"}]}
    with patch(POST, return_value=http_response(body)) as post:
        assert tool.search(SETTINGS, "Goal", "meaning of life") == "42"
    assert post.call_args.kwargs["headers"]["X-API-KEY"] == "serp-key"
    assert post.call_args.kwargs["json"] == {"q": "meaning of life"}
    fake_handle.complete.assert_not_called()


def test_snippets_are_summarised_by_the_model(fake_handle, http_response):
    tool = SerperSearch("serp-key", model_factory=lambda s: fake_handle)
    body = {
        "knowledgeGraph": {"description": "Kyoto is a city in Japan."},
        "organic": [{"snippet": "Rain expected."}, {"title": "no snippet"}],
    }
    with patch(POST, return_value=http_response(body)):
        result = tool.run(SETTINGS, "Visit Kyoto", "kyoto weather")

    assert result.content == "model output"
    assert result.metadata["snippets"] == ["Kyoto is a city in Japan.", "Rain expected."]
    prompt = fake_handle.complete.call_args.args[0]
    assert "kyoto weather" in prompt
    assert "Rain expected." in prompt


def test_empty_results_report_no_result(fake_handle, http_response):
    tool = SerperSearch("serp-key", model_factory=lambda s: fake_handle)
    with patch(POST, return_value=http_response({"organic": []})):
        assert tool.search(SETTINGS, "Goal", "query") == NO_RESULT_TEXT


def test_http_error_raises_tool_error(fake_handle, http_response):
    tool = SerperSearch("serp-key", model_factory=lambda s: fake_handle)
    with patch(POST, return_value=http_response({"message": "forbidden"}, status_code=403)):
        with pytest.raises(ToolExecutionError):
            tool.search(SETTINGS, "Goal", "query")


def test_network_error_raises_tool_error(fake_handle):
    tool = SerperSearch("serp-key", model_factory=lambda s: fake_handle)
    with patch(POST, side_effect=requests.Timeout("slow")):
        with pytest.raises(ToolExecutionError):
            tool.search(SETTINGS, "Goal", "query")


def test_collect_snippets_respects_limit():
    body = {"organic": [{"snippet": f"s{i}"} for i in range(20)]}
    assert collect_snippets(body, limit=3) == ["s0", "s1", "s2"]


def test_malformed_search_body_raises_tool_error(fake_handle, http_response):
    tool = SerperSearch("serp-key", model_factory=lambda s: fake_handle)
    for body in (["not", "a", "dict"], {"answerBox": "42"}, {"organic": ["snippet text"]}):
        with patch(POST, return_value=http_response(body)):
            with pytest.raises(ToolExecutionError):
                tool.search(SETTINGS, "Goal", "query")


# ---------------------------------------------------------------------------
# Module-level search with server configuration
# ---------------------------------------------------------------------------


def test_module_search_without_server_key_is_unavailable():
    with patch(POST) as post:
        with pytest.raises(SearchUnavailableError):
            search(SETTINGS, "g", "q", config=ServerConfig())
    post.assert_not_called()


def test_module_search_uses_server_key_and_config_models(http_response, monkeypatch):
    monkeypatch.delenv("OPENAI_API_BASE_URL", raising=False)
    config = ServerConfig(openai_api_keys=("server-key",), serp_api_key="serp-key")
    responses = {
        SERPER_ENDPOINT: http_response({"organic": [{"snippet": "Tokyo is the capital of Japan."}]}),
        "https://api.openai.com/v1/chat/completions": http_response(
            {"choices": [{"message": {"content": "Tokyo."}, "finish_reason": "stop"}]}
        ),
    }
    with patch(POST, side_effect=lambda url, **kwargs: responses[url]) as post:
        assert search(SETTINGS, "g", "capital of Japan", config=config) == "Tokyo."

    serper_call, model_call = post.call_args_list
    assert serper_call.kwargs["headers"]["X-API-KEY"] == "serp-key"
    assert model_call.kwargs["headers"]["Authorization"] == "Bearer server-key"
    assert model_call.kwargs["json"]["model"] == config.default_model
