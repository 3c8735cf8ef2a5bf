import pytest
from unittest.mock import MagicMock

from goal_agent.config import ServerConfig


@pytest.fixture
def server_config():
    return ServerConfig(openai_api_keys=("server-key-1", "server-key-2"), serp_api_key=None)


@pytest.fixture
def fake_handle():
    handle = MagicMock()
    handle.complete.return_value = "model output"
    return handle


@pytest.fixture
def http_response():
    def _build(body, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = body
        response.text = str(body)
        return response

    return _build
