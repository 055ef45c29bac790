"""Domain registration, search, verification and transfer tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field, StrictBool

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.errors import UpstreamStatusError
from hostcase.foundation.schema import (
    DomainName,
    EmailAddress,
    EmptyParams,
    JsonObject,
    NestedParams,
    NonEmptyStr,
    PositiveInteger,
    StringList,
    ToolParams,
)

from ._common import DomainParams, PackageDomainParams, PackageParams, resolve_reseller_id, seg

domains = ToolModule("domains")


# ─────────────────────────────────────────────────────────────────────────────
# Params
# ─────────────────────────────────────────────────────────────────────────────

class Contact(NestedParams):
    """Registrant contact."""

    name: NonEmptyStr = Field(description="Contact person name")
    organisation: NonEmptyStr | None = Field(default=None, description="Organisation name")
    address: NonEmptyStr = Field(description="Street address")
    city: NonEmptyStr
    sp: NonEmptyStr = Field(description="State/Province")
    pc: NonEmptyStr = Field(description="Postal code")
    cc: NonEmptyStr = Field(description="Country code (e.g., GB, US)")
    telephone: NonEmptyStr
    email: EmailAddress


class RegisterDomainParams(ToolParams):
    name: DomainName = Field(description="Domain name to register (e.g., example.com)")
    years: PositiveInteger = Field(description="Number of years to register for")
    contact: Contact
    privacy_service: StrictBool | None = Field(default=None, description="Enable domain privacy protection")
    nameservers: StringList | None = Field(default=None, description="Custom nameservers")
    stack_user: NonEmptyStr | None = Field(default=None, description="Stack user to grant access to")


class SearchDomainsParams(ToolParams):
    search_term: NonEmptyStr = Field(
        description="Full domain name (example.com) or a prefix (example) to search across all TLDs",
    )
    suggestions: StrictBool | None = Field(default=None, description="Enable domain name suggestions")
    tlds: StringList | None = Field(default=None, description="Specific TLDs to search")


class TransferLockParams(PackageDomainParams):
    enabled: StrictBool = Field(description="Enable (true) or disable (false) transfer lock")


class TransferDomainParams(PackageDomainParams):
    transfer_data: JsonObject = Field(description="Transfer configuration including auth code and contact details")


class SubdomainParams(PackageParams):
    subdomain: NonEmptyStr = Field(description="The subdomain name, e.g. \"blog\"")


# ─────────────────────────────────────────────────────────────────────────────
# Tools
# ─────────────────────────────────────────────────────────────────────────────

@domains.tool()
async def list_domains(client: APIClient, params: EmptyParams) -> Any:
    """List all domains in the reseller account."""
    return await client.get("/domain")


@domains.tool()
async def get_domain_info(client: APIClient, params: DomainParams) -> Any:
    """Get detailed information about a specific domain."""
    rid = await resolve_reseller_id(client)
    return await client.get(f"/reseller/{seg(rid)}/domain/{seg(params.domain_id)}")


@domains.tool()
async def search_domains(client: APIClient, params: SearchDomainsParams) -> Any:
    """Search for domain availability and get suggestions."""
    query: dict[str, Any] = {"suggestions": params.suggestions}
    if params.tlds:
        query["tlds"] = ",".join(params.tlds)
    return await client.get(f"/domain-search/{seg(params.search_term)}", params=query)


@domains.tool(read_only=False)
async def register_domain(client: APIClient, params: RegisterDomainParams) -> Any:
    """Register a new domain name."""
    rid = await resolve_reseller_id(client)
    body: dict[str, Any] = {
        "name": params.name,
        "years": params.years,
        "contact": params.contact.model_dump(exclude_none=True),
    }
    optional = {"privacyService": params.privacy_service, "nameservers": params.nameservers,
                "stackUser": params.stack_user}
    body.update((k, v) for k, v in optional.items() if v is not None)
    return await client.post(f"/reseller/{seg(rid)}/addDomain", body)


@domains.tool()
async def get_domain_verification_status(client: APIClient, params: EmptyParams) -> Any:
    """Get verification status for domains requiring verification."""
    try:
        return await client.get("/domainVerification")
    except UpstreamStatusError as e:
        # No domains pending verification
        if e.status_code == 404:
            return []
        raise


@domains.tool(read_only=False)
async def resend_domain_verification_email(client: APIClient, params: PackageDomainParams) -> Any:
    """Resend the registrant verification email for a domain."""
    return await client.post(
        f"/package/{seg(params.package_id)}/domain/{seg(params.domain_id)}/resendVerificationEmail", {},
    )


@domains.tool()
async def get_domain_periods(client: APIClient, params: EmptyParams) -> Any:
    """List all possible domain periods supported for registration."""
    return await client.get("/domain-period")


@domains.tool()
async def get_domain_premium_types(client: APIClient, params: EmptyParams) -> Any:
    """List all domain extensions with their associated premium group."""
    return await client.get("/domainPremiumType")


@domains.tool()
async def get_domain_transfer_status(client: APIClient, params: PackageDomainParams) -> Any:
    """Get the transfer status of a domain."""
    return await client.get(f"/package/{seg(params.package_id)}/domain/{seg(params.domain_id)}/pendingTransferStatus")


@domains.tool()
async def get_domain_auth_code(client: APIClient, params: PackageDomainParams) -> Any:
    """Get the authorization code (EPP code) for a domain."""
    return await client.get(f"/package/{seg(params.package_id)}/domain/{seg(params.domain_id)}/authCode")


@domains.tool()
async def get_domain_whois(client: APIClient, params: PackageDomainParams) -> Any:
    """Get WHOIS information for a domain."""
    return await client.get(f"/package/{seg(params.package_id)}/domain/{seg(params.domain_id)}/whois")


@domains.tool(read_only=False)
async def set_domain_transfer_lock(client: APIClient, params: TransferLockParams) -> Any:
    """Enable or disable the transfer lock for a domain."""
    return await client.post(
        f"/package/{seg(params.package_id)}/domain/{seg(params.domain_id)}/canTransfer",
        {"enable": params.enabled},
    )


@domains.tool(read_only=False)
async def transfer_domain(client: APIClient, params: TransferDomainParams) -> Any:
    """Transfer a domain into this account."""
    return await client.post(
        f"/package/{seg(params.package_id)}/domain/{seg(params.domain_id)}/transfer",
        params.transfer_data,
    )


@domains.tool()
async def list_subdomains(client: APIClient, params: PackageParams) -> Any:
    """List all subdomains for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/subdomains")


@domains.tool(read_only=False)
async def create_subdomain(client: APIClient, params: SubdomainParams) -> Any:
    """Create a subdomain for a hosting package."""
    return await client.post(f"/package/{seg(params.package_id)}/web/subdomains", {"name": params.subdomain})


@domains.tool(read_only=False)
async def remove_subdomain(client: APIClient, params: SubdomainParams) -> Any:
    """Remove a subdomain from a hosting package."""
    return await client.delete(f"/package/{seg(params.package_id)}/web/subdomains/{seg(params.subdomain)}")
