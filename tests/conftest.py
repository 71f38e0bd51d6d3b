"""
Shared fixtures: fake upstream providers and an in-process gateway.
"""

import json
from typing import Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from llm_gateway.core.config import load_config
from llm_gateway.service import main


Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """
    Callable for ``httpx.MockTransport`` that records every request.

    Routes are matched on host; unmatched hosts refuse the connection.
    """

    def __init__(self):
        self.routes: Dict[str, Handler] = {}
        self.requests: List[httpx.Request] = []

    def route(self, host: str, handler: Handler) -> None:
        self.routes[host] = handler

    def json_reply(self, host: str, body, status_code: int = 200) -> None:
        self.route(host, lambda request: httpx.Response(status_code, json=body))

    def requests_to(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            raise httpx.ConnectError("Connection refused", request=request)
        return handler(request)


def request_json(request: httpx.Request):
    return json.loads(request.content)


def openai_body(text: str = "Hello!", usage: bool = True) -> dict:
    body = {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": "stop",
            }
        ],
    }
    if usage:
        body["usage"] = {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
    return body


def gemini_body(text: str = "Hi from Gemini") -> dict:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
        ],
        "usageMetadata": {
            "promptTokenCount": 7,
            "candidatesTokenCount": 3,
            "totalTokenCount": 10,
        },
    }


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream_client(upstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def gateway_env(monkeypatch):
    """Server-side credentials; Gemini and xAI keys are left unset."""
    for var in ("OPENAI_API_KEY", "GEMINI_API_KEY", "XAI_API_KEY", "GROK_API_KEY",
                "LOCAL_API_KEY", "OPENAICOMPAT_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-server-key")
    return monkeypatch


@pytest.fixture
def gateway_app(tmp_path, upstream_client, gateway_env):
    """Gateway app wired to the fake upstream."""
    main.init_gateway(load_config(str(tmp_path / "missing.yaml")), upstream_client)
    yield main.app
    main.gateway_config = None
    main.registry = None


@pytest.fixture
def gateway(gateway_app) -> TestClient:
    return TestClient(gateway_app)
