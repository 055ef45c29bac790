"""SSL certificate tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field, StrictBool

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.schema import DomainName, JsonObject, NonEmptyStr, PositiveInteger, ToolParams

from ._common import PackageParams, resolve_reseller_id, seg

certificates = ToolModule("ssl")


class FreeSslParams(PackageParams):
    domains: list[DomainName] = Field(min_length=1, description="Domains to issue the certificate for")


class ForceSslParams(PackageParams):
    enabled: StrictBool = Field(description="Redirect all HTTP traffic to HTTPS")


class AddTlsCertificateParams(ToolParams):
    name: NonEmptyStr = Field(description="Certificate name or identifier")
    period_months: PositiveInteger = Field(description="Certificate validity period in months")
    configuration: JsonObject = Field(description="Certificate configuration details")


class RenewTlsCertificateParams(ToolParams):
    certificate_id: NonEmptyStr = Field(description="Certificate ID to renew")
    period_months: PositiveInteger = Field(description="Renewal period in months")


@certificates.tool()
async def get_ssl_certificates(client: APIClient, params: PackageParams) -> Any:
    """Get SSL certificates for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/certificates")


@certificates.tool(read_only=False)
async def add_free_ssl(client: APIClient, params: FreeSslParams) -> Any:
    """Add a free SSL certificate for one or more domains."""
    return await client.post(f"/package/{seg(params.package_id)}/web/freeSSL", {"domains": params.domains})


@certificates.tool()
async def get_force_ssl(client: APIClient, params: PackageParams) -> Any:
    """Get whether HTTPS redirection is enforced for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/forceSSL")


@certificates.tool(read_only=False)
async def set_force_ssl(client: APIClient, params: ForceSslParams) -> Any:
    """Enable or disable HTTPS redirection for a hosting package."""
    return await client.post(f"/package/{seg(params.package_id)}/web/forceSSL", {"enabled": params.enabled})


@certificates.tool(read_only=False)
async def add_tls_certificate(client: APIClient, params: AddTlsCertificateParams) -> Any:
    """Order a premium TLS/SSL certificate."""
    rid = await resolve_reseller_id(client)
    return await client.post(
        f"/reseller/{seg(rid)}/addTlsCertificate",
        {"name": params.name, "periodMonths": params.period_months, "configuration": params.configuration},
    )


@certificates.tool(read_only=False)
async def renew_tls_certificate(client: APIClient, params: RenewTlsCertificateParams) -> Any:
    """Renew an existing TLS/SSL certificate."""
    rid = await resolve_reseller_id(client)
    return await client.post(
        f"/reseller/{seg(rid)}/renewTlsCertificate",
        {"id": params.certificate_id, "periodMonths": params.period_months},
    )
