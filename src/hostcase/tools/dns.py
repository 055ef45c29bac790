"""DNS record tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.schema import DEFAULT_DNS_TTL, DnsRecordType, NonEmptyStr, PositiveInteger

from ._common import DomainParams, resolve_reseller_id, seg

dns = ToolModule("dns")


class UpdateDnsRecordParams(DomainParams):
    record_type: DnsRecordType = Field(description="Type of DNS record")
    name: NonEmptyStr = Field(description="Record name (subdomain, or @ for the root)")
    value: NonEmptyStr = Field(description="Record value (IP address, hostname, etc.)")
    ttl: PositiveInteger = Field(default=DEFAULT_DNS_TTL, description="Time to live in seconds")


@dns.tool()
async def get_dns_records(client: APIClient, params: DomainParams) -> Any:
    """Get DNS records for a domain."""
    rid = await resolve_reseller_id(client)
    return await client.get(f"/reseller/{seg(rid)}/domain/{seg(params.domain_id)}/dns")


@dns.tool(read_only=False)
async def update_dns_record(client: APIClient, params: UpdateDnsRecordParams) -> Any:
    """Update or add a DNS record for a domain."""
    rid = await resolve_reseller_id(client)
    return await client.post(
        f"/reseller/{seg(rid)}/domain/{seg(params.domain_id)}/dns",
        params.model_dump(include={"record_type", "name", "value", "ttl"}),
    )
