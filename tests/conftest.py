"""Pytest bootstrap configuration.

Gateway stubs are built on httpx.MockTransport; the adapter receives the
mocked AsyncClient through its ``http_client`` argument.
"""
import json
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from indopay.core.settings import get_payment_settings


SERVER_KEY = "SB-Mid-server-test123"
FIXED_NOW = datetime(2024, 1, 15, 3, 0, 0, tzinfo=timezone.utc)


class RecordingTransport:
    """Collects requests and answers each with the configured response."""

    def __init__(self, status_code: int = 200, body: Any = None, *, content: bytes | None = None):
        self.status_code = status_code
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def stub_gateway() -> Callable[..., tuple[httpx.AsyncClient, RecordingTransport]]:
    def _make(status_code: int = 200, body: Any = None, **kwargs):
        recorder = RecordingTransport(status_code, body, **kwargs)
        return httpx.AsyncClient(transport=httpx.MockTransport(recorder)), recorder
    return _make


@pytest.fixture
def fixed_now(monkeypatch):
    import indopay.infrastructure.external.payments.base as base_mod
    monkeypatch.setattr(base_mod, "_now", lambda: FIXED_NOW)
    return FIXED_NOW


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_payment_settings.cache_clear()
    yield
    get_payment_settings.cache_clear()


@pytest.fixture
def server_key() -> str:
    return SERVER_KEY
