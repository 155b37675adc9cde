from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from core.config import AppSettings

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GITHUB_TOKEN",
    "AUDITFIX_GEMINI_API_KEY",
    "AUDITFIX_GITHUB_TOKEN",
    "AUDITFIX_BACKEND_URL",
    "AUDITFIX_GATEWAY_URL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        backend_url="http://backend.test",
        gemini_api_key="test-key",
        gemini_api_base="https://gemini.test/v1beta",
        github_api_base="https://github-api.test",
        github_token=None,
        gateway_url="http://gateway.test",
    )


@pytest.fixture
def make_client(settings: AppSettings) -> Callable[..., TestClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response], app_settings: AppSettings | None = None) -> TestClient:
        app = create_app(app_settings or settings, transport=httpx.MockTransport(handler))
        return TestClient(app)

    return _make


def gemini_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def unexpected(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected outbound request: {request.method} {request.url}")
