"""Shared fixtures: a scripted upstream behind httpx.MockTransport, plus client and dispatcher wiring."""

from __future__ import annotations

import base64
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import orjson
import pytest
import pytest_asyncio
from pydantic import SecretStr

from hostcase.client import APIClient
from hostcase.foundation.config import Config, clear_settings_cache
from hostcase.runtime import ConstantBackoff, Dispatcher, RetryPolicy
from hostcase.runtime.observability import BoundLogger, CaptureRenderer, clear_secrets
from hostcase.tools import build_registry

API_KEY = "k3y-0123456789abcdef"
ENCODED_KEY = base64.b64encode(API_KEY.encode()).decode()
RESELLER_ID = "10001"
BASE_URL = "https://api.test"

Responder = Callable[[httpx.Request], httpx.Response]


def reply(status: int = 200, json: Any = None, *, text: str | None = None,
          headers: dict[str, str] | None = None) -> Responder:
    """Responder building a fresh response per request."""
    def respond(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status, text=text, headers=headers)
        if json is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=json, headers=headers)
    return respond


def fail(exc: type[httpx.TransportError], message: str = "boom") -> Responder:
    def respond(request: httpx.Request) -> httpx.Response:
        raise exc(message, request=request)
    return respond


class MockUpstream:
    """In-memory stand-in for the upstream API.

    Routes are (METHOD, path) -> queue of responders; the last responder in a
    queue repeats. GET /reseller answers with RESELLER_ID unless overridden.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Responder]] = {
            ("GET", "/reseller"): [reply(json={"id": RESELLER_ID, "name": "Test Reseller"})],
        }
        self.fallback: Responder = reply(404, {"error": "unrouted"})

    def on(self, method: str, path: str, *responders: Responder) -> MockUpstream:
        self._routes[(method.upper(), path)] = list(responders)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return self.fallback(request)
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        return responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests
                if (method is None or r.method == method) and (path is None or r.url.path == path)]

    def tool_calls(self) -> list[httpx.Request]:
        """Requests other than the reseller-id lookup."""
        return [r for r in self.requests if r.url.path != "/reseller"]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return orjson.loads(request.content) if request.content else None


@pytest.fixture(autouse=True)
def _isolated_state() -> object:
    """Fresh settings cache and secret registry per test."""
    clear_settings_cache()
    clear_secrets()
    yield
    clear_settings_cache()
    clear_secrets()


@pytest.fixture
def config() -> Config:
    return Config(base_url=BASE_URL, credential=SecretStr(API_KEY))


@pytest.fixture
def upstream() -> MockUpstream:
    return MockUpstream()


@pytest.fixture
def retry() -> RetryPolicy:
    return RetryPolicy(max_retries=2, backoff=ConstantBackoff(0.0))


@pytest.fixture
def logs() -> CaptureRenderer:
    return CaptureRenderer()


@pytest_asyncio.fixture
async def client(config: Config, upstream: MockUpstream, retry: RetryPolicy,
                 logs: CaptureRenderer) -> AsyncIterator[APIClient]:
    api = APIClient(config, retry=retry, transport=upstream.transport, logger=BoundLogger(_renderer=logs))
    yield api
    await api.aclose()


@pytest.fixture
def dispatcher(client: APIClient, logs: CaptureRenderer) -> Dispatcher:
    return Dispatcher(build_registry(), client, logger=BoundLogger(_renderer=logs))
