"""Shared parameter models and upstream lookups used by several tool modules."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

from pydantic import Field

from hostcase.client import APIClient
from hostcase.foundation.errors import MalformedResponseError
from hostcase.foundation.schema import NonEmptyStr, ToolParams

_UUID_RE = re.compile(r"^[a-f0-9-]{36}$", re.IGNORECASE)


class PackageParams(ToolParams):
    package_id: NonEmptyStr = Field(description="The hosting package ID")


class DomainParams(ToolParams):
    domain_id: NonEmptyStr = Field(description="The domain ID (usually the domain name)")


class PackageDomainParams(ToolParams):
    package_id: NonEmptyStr = Field(description="Package ID containing the domain")
    domain_id: NonEmptyStr = Field(description="Domain ID within the package")


class PackageEmailParams(ToolParams):
    package_id: NonEmptyStr = Field(description="The hosting package ID")
    email_id: NonEmptyStr = Field(description="The email domain ID")


def seg(value: str) -> str:
    """Escape one path segment."""
    return quote(value, safe="")


def reseller_record(payload: Any) -> dict[str, Any]:
    """Account record from GET /reseller, which answers with an object, a one-element array or a bare UUID."""
    match payload:
        case [first, *_]:
            payload = first
        case str() if _UUID_RE.match(payload.strip()):
            return {"id": payload.strip()}
    if not isinstance(payload, dict):
        raise MalformedResponseError("GET", "/reseller", f"expected an account object, got {type(payload).__name__}")
    return payload


async def resolve_reseller_id(client: APIClient) -> str:
    """Reseller id of the authenticated account. Looked up per call; accounts differ and ids are never hardcoded."""
    record = reseller_record(await client.get("/reseller"))
    if (rid := record.get("id")) in (None, ""):
        raise MalformedResponseError("GET", "/reseller", "unable to determine reseller id from account information")
    return str(rid)
