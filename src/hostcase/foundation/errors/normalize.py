"""Map any failure surfaced during dispatch onto the fixed error taxonomy.

Classification is total and deterministic:

    401, 403            -> Auth
    404                 -> NotFound
    429                 -> RateLimited       (retryable)
    other 4xx           -> UpstreamRejected
    5xx                 -> UpstreamError     (retryable)
    timeout / transport -> UpstreamError     (retryable)
    unparseable body    -> MalformedResponse
    HostcaseError       -> its own record
    anything else       -> Internal

Upstream text never reaches a message verbatim: it is reduced to a short
excerpt and every known secret (raw and base64 forms) is masked.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable

import httpx
import orjson

from .errors import ErrorKind, ErrorRecord, FieldIssue, HostcaseError, MalformedResponseError, UpstreamStatusError

REDACTED = "[REDACTED]"
_EXCERPT_LIMIT = 200
_MESSAGE_KEYS = ("message", "error", "description", "detail")
_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_SCRIPT_RE = re.compile(r"<(script|style)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of each secret in text. Longest secrets first so overlaps mask fully."""
    for secret in sorted((s for s in secrets if s), key=len, reverse=True):
        if secret in text:
            text = text.replace(secret, REDACTED)
    return text


def upstream_excerpt(body: str, content_type: str = "") -> str:
    """Short, human-readable summary of an upstream error body (unredacted)."""
    body = body.strip()
    if not body:
        return ""
    if "html" in content_type.lower() or body.startswith("<"):
        text = _TAG_RE.sub(" ", _SCRIPT_RE.sub(" ", body))
    else:
        try:
            parsed = orjson.loads(body)
        except orjson.JSONDecodeError:
            text = body
        else:
            text = _message_from_json(parsed)
    text = _WS_RE.sub(" ", text).strip()
    return text if len(text) <= _EXCERPT_LIMIT else f"{text[:_EXCERPT_LIMIT - 3]}..."


def _message_from_json(parsed: object) -> str:
    if isinstance(parsed, dict):
        for key in _MESSAGE_KEYS:
            if (value := parsed.get(key)) not in (None, ""):
                return value if isinstance(value, str) else orjson.dumps(value).decode()
        return ""
    if isinstance(parsed, str):
        return parsed
    return ""


def kind_for_status(status: int) -> ErrorKind:
    """Error kind for a non-2xx upstream status."""
    if status in (401, 403):
        return ErrorKind.AUTH
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if 400 <= status < 500:
        return ErrorKind.UPSTREAM_REJECTED
    if status >= 500:
        return ErrorKind.UPSTREAM_ERROR
    # 1xx/3xx reaching here means the upstream did something we cannot use
    return ErrorKind.MALFORMED_RESPONSE


_STATUS_PHRASES: dict[ErrorKind, str] = {
    ErrorKind.AUTH: "was refused: credentials rejected by the upstream",
    ErrorKind.NOT_FOUND: "found no such resource upstream",
    ErrorKind.RATE_LIMITED: "was rate limited by the upstream",
    ErrorKind.UPSTREAM_REJECTED: "was rejected by the upstream",
    ErrorKind.UPSTREAM_ERROR: "failed with an upstream server error",
    ErrorKind.MALFORMED_RESPONSE: "returned an unexpected status",
}


def _from_status(exc: UpstreamStatusError, secrets: Iterable[str]) -> ErrorRecord:
    kind = kind_for_status(exc.status_code)
    message = f"{exc.method} {exc.path} {_STATUS_PHRASES[kind]}"
    if excerpt := upstream_excerpt(exc.body, exc.content_type):
        message = f"{message}: {excerpt}"
    return ErrorRecord.create(kind, redact(message, secrets), http_status=exc.status_code)


def _scrub_record(record: ErrorRecord, secrets: tuple[str, ...]) -> ErrorRecord:
    """Record with secrets removed from its message and field issues; unchanged when already clean."""
    message = redact(record.message, secrets)
    details = record.details and tuple(
        FieldIssue(path=redact(i.path, secrets), reason=redact(i.reason, secrets)) for i in record.details
    )
    if message == record.message and details == record.details:
        return record
    return record.model_copy(update={"message": message, "details": details})


def normalize(exc: BaseException, *, secrets: Iterable[str] = ()) -> ErrorRecord:
    """Produce exactly one ErrorRecord for any failure."""
    secrets = tuple(secrets)
    match exc:
        case HostcaseError():
            return _scrub_record(exc.record, secrets)
        case UpstreamStatusError():
            return _from_status(exc, secrets)
        case MalformedResponseError():
            return ErrorRecord.create(
                ErrorKind.MALFORMED_RESPONSE,
                redact(f"{exc.method} {exc.path} returned an unparseable body: {exc.reason}", secrets),
                http_status=exc.status_code,
            )
        case httpx.TimeoutException() | asyncio.TimeoutError():
            return ErrorRecord.create(ErrorKind.UPSTREAM_ERROR, _describe_transport("timed out", exc, secrets))
        case httpx.TransportError():
            return ErrorRecord.create(ErrorKind.UPSTREAM_ERROR, _describe_transport("network failure", exc, secrets))
        case httpx.DecodingError():
            return ErrorRecord.create(ErrorKind.MALFORMED_RESPONSE, redact(f"Could not decode upstream body: {exc}", secrets))
        case _:
            detail = redact(str(exc), secrets)
            message = f"Unexpected {type(exc).__name__}" + (f": {detail}" if detail else "")
            return ErrorRecord.create(ErrorKind.INTERNAL, message)


def _describe_transport(what: str, exc: BaseException, secrets: Iterable[str]) -> str:
    target = ""
    request = getattr(exc, "_request", None)  # httpx raises RuntimeError from .request when unset
    if isinstance(request, httpx.Request):
        target = f" ({request.method} {request.url.path})"
    detail = redact(str(exc), secrets)
    return f"Upstream request {what}{target}" + (f": {detail}" if detail else "")
