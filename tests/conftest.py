"""Shared test fixtures."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from services.cache import TTLCache

UPSTREAM_URL = "https://prophetic.test/api"

WINE_VIGNETTES = {
    "vignettes": [
        {
            "category": "WINE",
            "brand_name": "Test",
            "public_url": "u",
            "nb_insights": 3,
            "score": 8.2,
            "trend": "up",
            "subtitle": "s",
        }
    ]
}


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ChunkedStream(httpx.AsyncByteStream):
    """Upstream body delivered chunk by chunk, optionally failing at the end."""

    def __init__(self, chunks: list[bytes], error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


class StubUpstream:
    """Records outgoing requests and answers them by URL path."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, path: str, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self._routes[path] = responder

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._routes.get(request.url.path)
        if responder is None:
            return httpx.Response(404, text="no stub")
        return responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


@pytest.fixture
def settings(monkeypatch) -> Settings:
    monkeypatch.setenv("PROPHETIC_API_URL", UPSTREAM_URL + "/")
    monkeypatch.setenv("PROPHETIC_API_TOKEN", "secret-token")
    monkeypatch.setenv("GIT_SHA", "abc123")
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    return Settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def client(settings, cache, upstream):
    app = create_app(settings=settings, vignette_cache=cache, transport=upstream.transport)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
