from unittest.mock import MagicMock

import pytest

from goal_agent.config import ServerConfig
from goal_agent.core.agent.service import (
    SEARCH_UNAVAILABLE_NOTICE,
    LLMAgentService,
    MockAgentService,
    create_agent_service,
)
from goal_agent.core.primitives import DEFAULT_ANALYSIS, ActionKind, Analysis, ToolExecutionError
from goal_agent.settings import ModelSettings

SETTINGS = ModelSettings(custom_api_key="sk-" + "a" * 40)


def _service(handle, **kwargs):
    return LLMAgentService(ServerConfig(serp_api_key=None), model_factory=lambda settings: handle, **kwargs)


def _scripted_handle(*outputs):
    handle = MagicMock()
    handle.complete.side_effect = list(outputs)
    return handle


# ---------------------------------------------------------------------------
# Live service
# ---------------------------------------------------------------------------


def test_start_goal_returns_parsed_tasks():
    handle = _scripted_handle('["Plan trip", "Book hotel"]')
    service = _service(handle)
    assert service.start_goal(SETTINGS, "Visit Kyoto") == ["Plan trip", "Book hotel"]
    prompt = handle.complete.call_args.args[0]
    assert "Visit Kyoto" in prompt
    assert '"English"' in prompt


def test_start_goal_uses_explicit_language():
    handle = _scripted_handle("[]")
    _service(handle).start_goal(SETTINGS, "Goal", language="German")
    assert '"German"' in handle.complete.call_args.args[0]


def test_start_goal_with_garbage_output_has_no_tasks():
    assert _service(_scripted_handle("I cannot help")).start_goal(SETTINGS, "Goal") == []


def test_analyze_task_falls_back_on_bad_output():
    service = _service(_scripted_handle("nope"))
    assert service.analyze_task(SETTINGS, "Goal", "Task") is DEFAULT_ANALYSIS


def test_reason_analysis_executes_with_model(fake_handle):
    search_tool = MagicMock()
    service = _service(fake_handle, search_tool=search_tool)
    result = service.execute_task(SETTINGS, "Goal", "Task", Analysis(ActionKind.REASON, "think"))
    assert result == "model output"
    search_tool.search.assert_not_called()


def test_search_analysis_routes_to_search_tool(fake_handle):
    search_tool = MagicMock()
    search_tool.search.return_value = "search summary"
    service = _service(fake_handle, search_tool=search_tool)
    result = service.execute_task(SETTINGS, "Goal", "Task", Analysis(ActionKind.SEARCH, "kyoto weather"))
    assert result == "search summary"
    search_tool.search.assert_called_once_with(SETTINGS, "Goal", "kyoto weather")
    fake_handle.complete.assert_not_called()


def test_search_without_key_degrades_to_model_answer():
    handle = _scripted_handle("Executed the task")
    service = _service(handle)
    result = service.execute_task(SETTINGS, "Goal", "Task", Analysis(ActionKind.SEARCH, "query"))
    assert result.startswith(SEARCH_UNAVAILABLE_NOTICE)
    assert "ERROR: Failed to search" in result
    assert result.endswith("Executed the task")


def test_search_tool_failure_propagates(fake_handle):
    search_tool = MagicMock()
    search_tool.search.side_effect = ToolExecutionError("boom")
    service = _service(fake_handle, search_tool=search_tool)
    with pytest.raises(ToolExecutionError):
        service.execute_task(SETTINGS, "Goal", "Task", Analysis(ActionKind.SEARCH, "query"))


def test_create_tasks_filters_completed_and_renders_pending():
    handle = _scripted_handle('["Old task", "New task"]')
    service = _service(handle)
    tasks = service.create_tasks(
        SETTINGS, "Goal", ["Pending one"], "Old task", "Some result", completed_tasks=["Old task"]
    )
    assert tasks == ["New task"]
    prompt = handle.complete.call_args.args[0]
    assert '["Pending one"]' in prompt
    assert "Some result" in prompt


def test_each_call_builds_a_fresh_handle(fake_handle):
    factory = MagicMock(return_value=fake_handle)
    service = LLMAgentService(ServerConfig(), model_factory=factory, search_tool=MagicMock())
    service.execute_task(SETTINGS, "Goal", "A", Analysis(ActionKind.REASON, ""))
    service.execute_task(SETTINGS, "Goal", "B", Analysis(ActionKind.REASON, ""))
    assert factory.call_count == 2


# ---------------------------------------------------------------------------
# Mock service and selection
# ---------------------------------------------------------------------------


def test_mock_service_canned_values():
    service = MockAgentService()
    assert service.start_goal(SETTINGS, "Goal") == ["Task 1"]
    assert service.analyze_task(SETTINGS, "Goal", "Task 1") == Analysis(ActionKind.REASON, "Mock analysis")
    assert service.execute_task(SETTINGS, "Goal", "Task 1", DEFAULT_ANALYSIS) == "Result: Task 1"
    assert service.create_tasks(SETTINGS, "Goal", [], "Task 1", "Result: Task 1") == ["Task 4"]


def test_create_agent_service_honours_mock_mode():
    assert isinstance(create_agent_service(ServerConfig(mock_mode=True)), MockAgentService)
    assert isinstance(create_agent_service(ServerConfig(mock_mode=False)), LLMAgentService)


def test_mock_mode_read_from_environment(monkeypatch):
    monkeypatch.setenv("GOAL_AGENT_MOCK_MODE", "true")
    monkeypatch.setenv("OPENAI_API_KEY", "k1, k2")
    config = ServerConfig.from_env()
    assert config.mock_mode
    assert config.openai_api_keys == ("k1", "k2")


def test_degraded_search_is_logged_as_warning(caplog):
    service = _service(_scripted_handle("Executed the task"))
    with caplog.at_level("WARNING", logger="goal_agent.core.agent.service"):
        service.execute_task(SETTINGS, "Goal", "Look it up", Analysis(ActionKind.SEARCH, "query"))
    assert any(
        record.name == "goal_agent.core.agent.service" and "no search key" in record.getMessage()
        for record in caplog.records
    )
