"""Authenticated client for the upstream hosting API.

Every upstream call goes through APIClient. It owns the base URL, the auth
header, the timeout and the retry policy, so tool handlers only name a method,
a path and a body.

Failures are raised, never returned:
- UpstreamStatusError: non-2xx status (after any retries)
- MalformedResponseError: 2xx body that is not JSON
- httpx.TimeoutException / httpx.TransportError: no usable response

Example:
    >>> async with APIClient(load_config()) as client:
    ...     domains = await client.get("/domain")
    ...     await client.post(f"/package/{package_id}/web/forceSSL", {"enabled": True})
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from types import TracebackType
from typing import Any, Self

import httpx
import orjson

from hostcase.foundation.config import Config
from hostcase.foundation.errors import MalformedResponseError, UpstreamStatusError
from hostcase.runtime.limiter import TokenBucket
from hostcase.runtime.observability import BoundLogger, get_logger, register_secrets
from hostcase.runtime.retry import RetryPolicy

from .auth import BearerAuth

QueryParams = Mapping[str, str | int | float | bool | None]


class APIClient:
    """Single chokepoint for upstream HTTP calls.

    Args:
        config: Immutable credential/config bundle
        retry: Retry policy for idempotent calls (default: RetryPolicy())
        limiter: Optional process-wide token bucket acquired before each attempt
        transport: httpx transport override (httpx.MockTransport in tests)
    """

    __slots__ = ("config", "retry", "limiter", "_auth", "_http", "_log")

    def __init__(
        self,
        config: Config,
        *,
        retry: RetryPolicy | None = None,
        limiter: TokenBucket | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.retry = retry or RetryPolicy()
        self.limiter = limiter
        self._auth = BearerAuth.from_config(config)
        self._log = logger or get_logger("hostcase.client")
        register_secrets(*config.secrets())
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers=self._auth.apply({
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": config.user_agent,
            }),
            timeout=config.timeout,
            transport=transport,
        )

    # ─────────────────────────────────────────────────────────────────
    # Verbs
    # ─────────────────────────────────────────────────────────────────

    async def get(self, path: str, *, params: QueryParams | None = None, timeout: float | None = None) -> Any:
        return await self.request("GET", path, params=params, timeout=timeout)

    async def post(self, path: str, body: Any = None, *, params: QueryParams | None = None,
                   timeout: float | None = None) -> Any:
        return await self.request("POST", path, body, params=params, timeout=timeout)

    async def put(self, path: str, body: Any = None, *, params: QueryParams | None = None,
                  timeout: float | None = None) -> Any:
        return await self.request("PUT", path, body, params=params, timeout=timeout)

    async def patch(self, path: str, body: Any = None, *, params: QueryParams | None = None,
                    timeout: float | None = None) -> Any:
        return await self.request("PATCH", path, body, params=params, timeout=timeout)

    async def delete(self, path: str, *, params: QueryParams | None = None, timeout: float | None = None) -> Any:
        return await self.request("DELETE", path, params=params, timeout=timeout)

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: QueryParams | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Send one logical request, retrying transient failures of idempotent methods.

        Returns the parsed JSON body unchanged, or None for an empty body.
        """
        method = method.upper()
        path = path if path.startswith("/") else f"/{path}"
        content = orjson.dumps(body) if body is not None else None
        query = {k: _query_value(v) for k, v in params.items() if v is not None} if params else None
        timeout = timeout if timeout is not None else self.config.timeout

        attempt = 0
        while True:
            if self.limiter is not None:
                await self.limiter.acquire()
            start = time.perf_counter()
            try:
                response = await self._http.request(method, path, content=content, params=query, timeout=timeout)
            except httpx.TransportError as e:
                if not self.retry.should_retry(method, e, attempt):
                    self._log.debug("upstream request failed", method=method, path=path,
                                    error=type(e).__name__, attempts=attempt + 1)
                    raise
                delay = self.retry.get_delay(attempt)
                reason: str | int = type(e).__name__
            else:
                elapsed = _ms(start)
                self._log.debug("upstream response", method=method, path=path,
                                status=response.status_code, duration_ms=elapsed)
                if response.is_success:
                    return _parse_body(method, path, response)
                if not self.retry.should_retry(method, response.status_code, attempt):
                    raise UpstreamStatusError(
                        method, path, response.status_code,
                        response.text, response.headers.get("content-type", ""),
                    )
                delay = self.retry.get_delay(attempt, response)
                reason = response.status_code
            attempt += 1
            self._log.warning("retrying upstream request", method=method, path=path,
                              reason=reason, attempt=attempt, delay_s=round(delay, 3))
            await asyncio.sleep(delay)

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"APIClient(base_url={self.config.base_url!r}, credential={self.config.credential_kind.value})"


def _parse_body(method: str, path: str, response: httpx.Response) -> Any:
    raw = response.content
    if not raw.strip():
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        kind = response.headers.get("content-type", "unknown content type").split(";")[0]
        raise MalformedResponseError(method, path, f"body is not valid JSON ({kind})", response.status_code) from None


def _query_value(v: str | int | float | bool) -> str | int | float:
    return str(v).lower() if isinstance(v, bool) else v


def _ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
