"""Mailbox, forwarder, spam policy, premium mailbox and webmail tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.schema import DomainName, EmailAddress, NonEmptyStr, ToolParams

from ._common import PackageEmailParams, PackageParams, resolve_reseller_id, seg

mailboxes = ToolModule("email")


class CreateEmailAccountParams(PackageParams):
    email: EmailAddress = Field(description="The email address to create")
    password: NonEmptyStr = Field(description="The password for the email account")


class CreateForwarderParams(PackageParams):
    source: EmailAddress = Field(description="The source email address")
    destinations: list[EmailAddress] = Field(min_length=1, description="Destination email addresses")


class WebmailParams(PackageEmailParams):
    mailbox_id: NonEmptyStr = Field(description="The mailbox ID")


class OrderPremiumMailboxParams(ToolParams):
    mailbox_id: NonEmptyStr = Field(description="The mailbox ID, e.g. \"m11111\"")
    local: NonEmptyStr = Field(description="The local part before the @ symbol")
    domain: DomainName = Field(description="The domain part after the @ symbol")
    for_user: NonEmptyStr | None = Field(default=None, description="User to assign the mailbox to")


class RenewPremiumMailboxParams(ToolParams):
    id: NonEmptyStr = Field(description="The premium mailbox ID to renew")


def _split(address: str) -> tuple[str, str]:
    local, _, domain = address.rpartition("@")
    return local, domain


@mailboxes.tool()
async def get_email_forwarders(client: APIClient, params: PackageEmailParams) -> Any:
    """Get email forwarders for a specific email domain."""
    return await client.get(f"/package/{seg(params.package_id)}/email/{seg(params.email_id)}/forwarder")


@mailboxes.tool()
async def get_all_email_forwarders(client: APIClient, params: PackageParams) -> Any:
    """Get all email forwarders for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/allMailForwarders")


@mailboxes.tool(read_only=False)
async def create_email_account(client: APIClient, params: CreateEmailAccountParams) -> Any:
    """Create an email account for a hosting package."""
    local, domain = _split(params.email)
    return await client.post(
        f"/package/{seg(params.package_id)}/email",
        {"local": local, "domain": domain, "password": params.password},
    )


@mailboxes.tool(read_only=False)
async def create_email_forwarder(client: APIClient, params: CreateForwarderParams) -> Any:
    """Create an email forwarder for a hosting package."""
    local, domain = _split(params.source)
    return await client.post(
        f"/package/{seg(params.package_id)}/email/forwarder",
        {"local": local, "domain": domain, "destinations": params.destinations},
    )


@mailboxes.tool(read_only=False)
async def generate_webmail_url(client: APIClient, params: WebmailParams) -> Any:
    """Generate a webmail single sign-on URL for a mailbox."""
    return await client.post(
        f"/package/{seg(params.package_id)}/email/{seg(params.email_id)}/webmail",
        {"id": params.mailbox_id},
    )


@mailboxes.tool()
async def get_email_configuration(client: APIClient, params: PackageEmailParams) -> Any:
    """Get email configuration for a domain in a package."""
    return await client.get(f"/package/{seg(params.package_id)}/email/{seg(params.email_id)}")


@mailboxes.tool()
async def get_mailbox_configuration(client: APIClient, params: PackageEmailParams) -> Any:
    """Get mailbox configuration for an email domain."""
    return await client.get(f"/package/{seg(params.package_id)}/email/{seg(params.email_id)}/mailbox")


@mailboxes.tool()
async def get_email_spam_blacklist(client: APIClient, params: PackageEmailParams) -> Any:
    """Get the spam blacklist for an email domain."""
    return await client.get(f"/package/{seg(params.package_id)}/email/{seg(params.email_id)}/spamPolicyListBlacklist")


@mailboxes.tool()
async def get_email_spam_whitelist(client: APIClient, params: PackageEmailParams) -> Any:
    """Get the spam whitelist for an email domain."""
    return await client.get(f"/package/{seg(params.package_id)}/email/{seg(params.email_id)}/spamPolicyListWhitelist")


@mailboxes.tool(read_only=False)
async def order_premium_mailbox(client: APIClient, params: OrderPremiumMailboxParams) -> Any:
    """Order a premium mailbox service."""
    rid = await resolve_reseller_id(client)
    body: dict[str, Any] = {
        "configuration": {"id": params.mailbox_id, "local": params.local, "domain": params.domain},
    }
    if params.for_user is not None:
        body["forUser"] = params.for_user
    return await client.post(f"/reseller/{seg(rid)}/addPremiumMailbox", body)


@mailboxes.tool(read_only=False)
async def renew_premium_mailbox(client: APIClient, params: RenewPremiumMailboxParams) -> Any:
    """Renew a premium mailbox subscription."""
    rid = await resolve_reseller_id(client)
    return await client.post(f"/reseller/{seg(rid)}/renewPremiumMailbox", {"id": params.id})
