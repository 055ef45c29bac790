"""Error taxonomy for tool dispatch.

Every failure a caller can observe is an ErrorRecord whose `kind` is drawn from
a fixed enumeration. Callers branch on `kind`, never on message text.
Uses Pydantic for validation and serialization.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ErrorKind(StrEnum):
    """Fixed classification of dispatch failures."""
    VALIDATION = "Validation"
    NOT_FOUND = "NotFound"
    AUTH = "Auth"
    RATE_LIMITED = "RateLimited"
    UPSTREAM_REJECTED = "UpstreamRejected"
    UPSTREAM_ERROR = "UpstreamError"
    MALFORMED_RESPONSE = "MalformedResponse"
    INTERNAL = "Internal"


# Kinds a caller may reasonably retry unchanged
RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({ErrorKind.RATE_LIMITED, ErrorKind.UPSTREAM_ERROR})


class FieldIssue(BaseModel):
    """One failing field in a validation error."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(description="Dotted path of the field; empty for the root object")
    reason: Annotated[str, Field(min_length=1)]

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}" if self.path else self.reason


class ErrorRecord(BaseModel):
    """Normalized failure handed back to a caller.

    Attributes:
        kind: Machine-readable classification
        message: Human-readable, credential-free description
        http_status: Upstream status code when one was received
        retryable: Whether retrying the same call unchanged might succeed
        details: Field-level validation failures (Validation kind only)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        extra="forbid",
        json_schema_extra={
            "title": "Error Record",
            "examples": [{
                "kind": "RateLimited",
                "message": "GET /domain was rate limited by the upstream (HTTP 429)",
                "http_status": 429,
                "retryable": True,
            }],
        },
    )

    kind: ErrorKind
    message: Annotated[str, Field(min_length=1)]
    http_status: Annotated[int, Field(ge=100, le=599)] | None = None
    retryable: bool = False
    details: tuple[FieldIssue, ...] | None = None

    @field_serializer("details")
    def _serialize_details(self, v: tuple[FieldIssue, ...] | None) -> list[dict[str, str]] | None:
        return None if v is None else [issue.model_dump() for issue in v]

    @classmethod
    def create(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        http_status: int | None = None,
        retryable: bool | None = None,
        details: tuple[FieldIssue, ...] | None = None,
    ) -> Self:
        """Factory defaulting `retryable` from the kind."""
        return cls(
            kind=kind,
            message=message,
            http_status=http_status,
            retryable=kind in RETRYABLE_KINDS if retryable is None else retryable,
            details=details,
        )

    def paths(self) -> list[str]:
        """Paths of every failing field, in reported order."""
        return [issue.path for issue in self.details or ()]

    def render(self) -> str:
        """Format for display to an agent."""
        status = f" (HTTP {self.http_status})" if self.http_status else ""
        lines = [f"[{self.kind}] {self.message}{status}"]
        lines += [f"  - {issue}" for issue in self.details or ()]
        if self.retryable:
            lines.append("This error may be recoverable; retrying later could succeed.")
        return "\n".join(lines)

    __str__ = render


# ─────────────────────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────────────────────

class HostcaseError(Exception):
    """Exception carrying an ErrorRecord. Raised locally, converted to an envelope at dispatch."""

    __slots__ = ("record",)

    def __init__(self, record: ErrorRecord) -> None:
        self.record = record
        super().__init__(record.message)

    @property
    def kind(self) -> ErrorKind:
        return self.record.kind


class ValidationFailed(HostcaseError):
    """Caller input did not match the tool's schema."""

    def __init__(self, issues: tuple[FieldIssue, ...], tool_name: str | None = None) -> None:
        where = f" for '{tool_name}'" if tool_name else ""
        count = len(issues)
        message = f"Invalid parameters{where}: {count} problem{'s' if count != 1 else ''} found"
        super().__init__(ErrorRecord.create(ErrorKind.VALIDATION, message, details=issues))

    @property
    def issues(self) -> tuple[FieldIssue, ...]:
        return self.record.details or ()


class ToolNotFoundError(HostcaseError):
    """No tool registered under the requested name."""

    def __init__(self, name: str, suggestions: Sequence[str] = ()) -> None:
        message = f"Tool '{name}' is not registered"
        if suggestions:
            message += f"; did you mean: {', '.join(suggestions)}"
        super().__init__(ErrorRecord.create(ErrorKind.NOT_FOUND, message))
        self.name = name


class DuplicateToolError(HostcaseError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(ErrorRecord.create(ErrorKind.INTERNAL, f"Tool '{name}' is already registered"))
        self.name = name


class RegistryClosedError(HostcaseError):
    """Registration attempted after the registry was sealed."""

    def __init__(self, name: str) -> None:
        super().__init__(ErrorRecord.create(
            ErrorKind.INTERNAL, f"Cannot register '{name}': registry is sealed after startup"
        ))


class ConfigurationError(HostcaseError):
    """Startup configuration is missing or unusable (credentials in particular)."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorRecord.create(ErrorKind.AUTH, message))


class UpstreamStatusError(Exception):
    """Upstream answered with a non-2xx status.

    Holds the raw body only for classification; the normalizer decides what, if
    anything, of it reaches a caller.
    """

    def __init__(self, method: str, path: str, status_code: int, body: str = "", content_type: str = "") -> None:
        self.method, self.path, self.status_code = method, path, status_code
        self.body, self.content_type = body, content_type
        super().__init__(f"{method} {path} returned HTTP {status_code}")


class MalformedResponseError(Exception):
    """Upstream answered 2xx with a body that is not the expected JSON."""

    def __init__(self, method: str, path: str, reason: str, status_code: int | None = None) -> None:
        self.method, self.path, self.reason, self.status_code = method, path, reason, status_code
        super().__init__(f"{method} {path}: {reason}")
