import pytest
import json
import yaml
import importlib
import httpx
from pathlib import Path
from fastapi import FastAPI, Request

from oai_client import OpenAIClient

TEST_API_KEY = "sk-test-1234567890"
TEST_BASE_URL = "http://test.example.com/v1"

# Mock response payloads
MOCK_COMPLETION_RESPONSE = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1677652288,
    "model": "gpt-4o-mini",
    "system_fingerprint": "fp_44709d6fcb",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "Hello there, how may I assist you today?",
                "refusal": None,
            },
            "logprobs": None,
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 9, "completion_tokens": 12, "total_tokens": 21},
}

MOCK_ANSWER_RESPONSE = {
    "id": "chatcmpl-42",
    "object": "chat.completion",
    "created": 1677652290,
    "model": "gpt-x",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "42"},
            "logprobs": None,
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 14, "completion_tokens": 1, "total_tokens": 15},
}

MOCK_MODELS_RESPONSE = {
    "object": "list",
    "data": [
        {"id": "gpt-4o-mini", "object": "model", "created": 1721172741, "owned_by": "system"},
        {"id": "gpt-3.5-turbo", "object": "model", "created": 1677610602, "owned_by": "openai"},
        {"id": "dall-e-3", "object": "model", "created": 1698785189, "owned_by": "system"},
    ],
}

MOCK_SINGLE_MODEL_RESPONSE = {
    "object": "list",
    "data": [{"id": "gpt-x", "object": "model", "created": 1, "owned_by": "org"}],
}

# Mock configurations
MOCK_CONFIG_PRESET = {
    "backend": {"name": "groq", "url": "", "model": ""},
    "settings": {"timeout": 30},
}

MOCK_CONFIG_WITH_URL = {
    "backend": {"name": "local", "url": "http://test.example.com/v1", "model": "gpt-4-test"},
    "settings": {"timeout": 30},
}


class MockResponse:
    """Mock of a streamed httpx.Response with proper async methods"""

    def __init__(self, status_code, content=None, headers=None, read_error=None):
        self.status_code = status_code
        self._content = content if content is not None else b""
        self.headers = headers or {"content-type": "application/json"}
        self.read_error = read_error
        self.closed = False

    async def aread(self):
        if self.read_error is not None:
            raise self.read_error
        if isinstance(self._content, (dict, list)):
            return json.dumps(self._content).encode()
        return (
            self._content
            if isinstance(self._content, bytes)
            else str(self._content).encode()
        )

    async def aclose(self):
        self.closed = True


@pytest.fixture
def mock_send(monkeypatch):
    """
    Patch httpx.AsyncClient.send to return queued MockResponses.

    Returns a recorder: set recorder.response (or recorder.error) and inspect
    recorder.requests after the call.
    """

    class Recorder:
        def __init__(self):
            self.response = MockResponse(200, MOCK_COMPLETION_RESPONSE)
            self.error = None
            self.requests = []

    recorder = Recorder()

    async def send(self, request, **kwargs):
        recorder.requests.append(request)
        if recorder.error is not None:
            raise recorder.error
        return recorder.response

    monkeypatch.setattr(httpx.AsyncClient, "send", send)
    return recorder


@pytest.fixture
def client():
    """Client pointed at the test base URL"""
    return OpenAIClient(TEST_API_KEY, base_url=TEST_BASE_URL)


def build_mock_server(models_response, completion_response):
    """FastAPI app serving the two OpenAI-compatible endpoints"""
    app = FastAPI(title="Mock OpenAI API")
    app.state.requests = []

    @app.get("/v1/models")
    async def list_models(request: Request):
        app.state.requests.append({"path": "/v1/models", "headers": dict(request.headers)})
        return models_response

    @app.post("/v1/chat/completions")
    async def chat_completions(request: Request):
        app.state.requests.append(
            {
                "path": "/v1/chat/completions",
                "headers": dict(request.headers),
                "body": await request.json(),
            }
        )
        return completion_response

    return app


@pytest.fixture
def mock_server():
    return build_mock_server(MOCK_SINGLE_MODEL_RESPONSE, MOCK_ANSWER_RESPONSE)


@pytest.fixture
def server_client(mock_server):
    """Client whose calls are served in-process by the mock server"""
    return OpenAIClient(
        TEST_API_KEY,
        base_url="http://testserver/v1",
        transport=httpx.ASGITransport(app=mock_server),
    )


def _reload_config(monkeypatch, mock_config):
    def mock_read_text(*args, **kwargs):
        return yaml.dump(mock_config)

    monkeypatch.delenv("OPENAI_API_BASE", raising=False)
    monkeypatch.setattr(Path, "read_text", mock_read_text)
    import oai_client.config

    importlib.reload(oai_client.config)
    return oai_client.config


@pytest.fixture
def mock_config_preset(monkeypatch):
    """Mock config file naming a provider preset"""
    yield _reload_config(monkeypatch, MOCK_CONFIG_PRESET)
    monkeypatch.undo()
    import oai_client.config

    importlib.reload(oai_client.config)


@pytest.fixture
def mock_config_with_url(monkeypatch):
    """Mock config file with an explicit URL and model"""
    yield _reload_config(monkeypatch, MOCK_CONFIG_WITH_URL)
    monkeypatch.undo()
    import oai_client.config

    importlib.reload(oai_client.config)
