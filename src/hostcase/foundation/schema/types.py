"""Parameter base models and reusable field types for tool input schemas.

Tool inputs are Pydantic models. The top-level model rejects unknown fields;
nested objects ignore them so upstream additions do not break callers.
Custom types raise `PydanticCustomError` so their reason text reaches the
caller unchanged.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, StrictInt, StrictStr
from pydantic_core import PydanticCustomError


class ToolParams(BaseModel):
    """Base for every tool's input schema. Unknown top-level fields are rejected."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        populate_by_name=True,
    )


class NestedParams(BaseModel):
    """Base for objects nested inside a tool's input. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)


class EmptyParams(ToolParams):
    """Input schema for tools that take no parameters."""


# ─────────────────────────────────────────────────────────────────────────────
# Field types
# ─────────────────────────────────────────────────────────────────────────────

_DOMAIN_RE = re.compile(r"^([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _non_empty(v: str) -> str:
    if not v:
        raise PydanticCustomError("non_empty", "must be a non-empty string")
    return v


def _domain(v: str) -> str:
    if not _DOMAIN_RE.match(v):
        raise PydanticCustomError("domain_name", "must be a valid domain name")
    return v.lower()


def _email(v: str) -> str:
    if not _EMAIL_RE.match(v):
        raise PydanticCustomError("email_address", "must be a valid email address")
    return v


def _reject_bool(v: Any) -> Any:
    # bool is an int subclass; a flag is never a count
    if isinstance(v, bool):
        raise PydanticCustomError("positive_integer", "must be a positive integer")
    return v


def _positive(v: int) -> int:
    if v <= 0:
        raise PydanticCustomError("positive_integer", "must be a positive integer")
    return v


NonEmptyStr = Annotated[StrictStr, AfterValidator(lambda v: _non_empty(v.strip()))]
DomainName = Annotated[NonEmptyStr, AfterValidator(_domain)]
EmailAddress = Annotated[NonEmptyStr, AfterValidator(_email)]
PositiveInteger = Annotated[StrictInt, BeforeValidator(_reject_bool), AfterValidator(_positive)]
StringList = list[NonEmptyStr]
JsonObject = dict[str, Any]

DnsRecordType = Literal["A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV"]
DEFAULT_DNS_TTL = 3600
