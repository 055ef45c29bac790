"""Tool dispatch: name + raw params in, exactly one ResultEnvelope out.

Per-call state machine (no state survives between calls):

    Received -> Validating -> Invalid -> Failed
                           -> Valid -> Invoking -> Succeeded | Failed

Unknown tools and invalid params fail before any network activity. Any
exception from a handler is normalized into an ErrorRecord; callers never see
a raw exception or traceback. Caller cancellation propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from hostcase.foundation.errors import (
    ErrorKind,
    ErrorRecord,
    HostcaseError,
    RequestEnvelope,
    ResultEnvelope,
    normalize,
)
from hostcase.foundation.schema import Validator, get_validator
from hostcase.runtime.observability import BoundLogger, get_logger

if TYPE_CHECKING:
    from hostcase.client import APIClient
    from hostcase.foundation.registry import ToolRegistry


class DispatchState(StrEnum):
    RECEIVED = "received"
    VALIDATING = "validating"
    INVALID = "invalid"
    VALID = "valid"
    INVOKING = "invoking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Dispatcher:
    """Routes invocations to tool handlers.

    Args:
        registry: Sealed catalog of tools
        client: Shared APIClient handed to every handler
        validator: Params validator (default: shared instance)
        logger: Structured logger (default: "hostcase.dispatch")

    Example:
        >>> dispatcher = Dispatcher(build_registry(), APIClient(load_config()))
        >>> result = await dispatcher.dispatch("get_dns_records", {"domain_id": "example.com"})
        >>> result.ok
        True
    """

    __slots__ = ("registry", "client", "_validator", "_log")

    def __init__(
        self,
        registry: ToolRegistry,
        client: APIClient,
        *,
        validator: Validator | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self.registry = registry
        self.client = client
        self._validator = validator or get_validator()
        self._log = logger or get_logger("hostcase.dispatch")

    async def dispatch(self, tool_name: str, params: Any = None, *, deadline: float | None = None) -> ResultEnvelope:
        """Run one tool invocation end to end.

        Args:
            tool_name: Registered tool name
            params: Raw caller input (a mapping; None means no params)
            deadline: Optional overall limit in seconds. On expiry the in-flight
                request is abandoned; a write may already have been applied
                upstream and is not rolled back.

        Returns:
            `ResultEnvelope(ok=True, data=...)` with the upstream JSON unmodified,
            or `ResultEnvelope(ok=False, error=...)`.
        """
        start = time.perf_counter()
        log = self._log.bind(tool=tool_name, dispatch_id=uuid.uuid4().hex[:8])
        log.debug("dispatch transition", state=DispatchState.RECEIVED.value)

        try:
            descriptor = self.registry.get(tool_name)
            log = log.bind(category=descriptor.category)
            if log.is_enabled_for(logging.DEBUG):
                log.debug("dispatch transition", state=DispatchState.VALIDATING.value, fields=_field_names(params))
            validated = self._validator.validate(descriptor.params_schema, params, tool_name=tool_name)
        except HostcaseError as e:
            if e.kind is ErrorKind.VALIDATION:
                log.debug("dispatch transition", state=DispatchState.INVALID.value)
            return self._failed(log, self._normalize(e), start)

        log.debug("dispatch transition", state=DispatchState.VALID.value)
        log.debug("dispatch transition", state=DispatchState.INVOKING.value)
        scope = asyncio.timeout(deadline)
        try:
            async with scope:
                data = await descriptor.handler(self.client, validated)
        except TimeoutError as e:
            record = _deadline_record(tool_name, deadline) if scope.expired() else self._normalize(e)
            return self._failed(log, record, start)
        except Exception as e:  # noqa: BLE001 - every handler failure becomes an ErrorRecord
            return self._failed(log, self._normalize(e), start)

        log.info("dispatch succeeded", state=DispatchState.SUCCEEDED.value, duration_ms=_ms(start))
        return ResultEnvelope.success(data)

    async def dispatch_request(self, request: RequestEnvelope, *, deadline: float | None = None) -> ResultEnvelope:
        return await self.dispatch(request.tool_name, request.params, deadline=deadline)

    def _normalize(self, exc: BaseException) -> ErrorRecord:
        return normalize(exc, secrets=self.client.config.secrets())

    def _failed(self, log: BoundLogger, record: ErrorRecord, start: float) -> ResultEnvelope:
        fields = {"state": DispatchState.FAILED.value, "kind": record.kind.value, "duration_ms": _ms(start)}
        if record.http_status is not None:
            fields["http_status"] = record.http_status
        if record.kind in (ErrorKind.INTERNAL, ErrorKind.MALFORMED_RESPONSE):
            log.error("dispatch failed", message=record.message, **fields)
        else:
            log.warning("dispatch failed", message=record.message, **fields)
        return ResultEnvelope.failure(record)

    def __repr__(self) -> str:
        return f"Dispatcher({self.registry!r})"


def _deadline_record(tool_name: str, deadline: float | None) -> ErrorRecord:
    return ErrorRecord.create(
        ErrorKind.UPSTREAM_ERROR,
        f"Dispatch of '{tool_name}' exceeded its {deadline}s deadline and was abandoned; "
        "a write may already have been applied upstream",
        retryable=True,
    )


def _field_names(params: Any) -> list[str] | None:
    """Key names only; values may be secrets."""
    return sorted(map(str, params)) if isinstance(params, Mapping) else None


def _ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
