"""Hosting package tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.schema import EmptyParams, NonEmptyStr, StringList, ToolParams

from ._common import PackageParams, resolve_reseller_id, seg

packages = ToolModule("packages")


class CreatePackageParams(ToolParams):
    domain_name: NonEmptyStr = Field(description="Primary domain name for the package")
    package_type: NonEmptyStr = Field(description="Package type (see get_package_types)")
    username: NonEmptyStr = Field(description="Username for the hosting account")
    password: NonEmptyStr = Field(description="Password for the hosting account")
    extra_domain_names: StringList | None = Field(default=None, description="Additional domain names")
    document_roots: dict[str, str] | None = Field(
        default=None, alias="documentRoots", description="Document root per domain",
    )
    stack_user: NonEmptyStr | None = Field(default=None, description="Stack user to grant access to")


class SuspendPackageParams(PackageParams):
    reason: NonEmptyStr | None = Field(default=None, description="Reason for suspension")


class PhpVersionParams(PackageParams):
    version: NonEmptyStr = Field(description="The PHP version to set, e.g. \"8.2\"")


class CreateFtpUserParams(PackageParams):
    username: NonEmptyStr = Field(description="The FTP username")
    password: NonEmptyStr = Field(description="The FTP password")
    path: NonEmptyStr = Field(default="/", description="Directory the user is confined to")


@packages.tool()
async def list_hosting_packages(client: APIClient, params: EmptyParams) -> Any:
    """List all hosting packages in the reseller account."""
    return await client.get("/package")


@packages.tool()
async def get_hosting_package_info(client: APIClient, params: PackageParams) -> Any:
    """Get detailed information about a specific hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}")


@packages.tool()
async def get_hosting_package_web_info(client: APIClient, params: PackageParams) -> Any:
    """Get web-specific hosting package information."""
    return await client.get(f"/package/{seg(params.package_id)}/web")


@packages.tool()
async def get_hosting_package_limits(client: APIClient, params: PackageParams) -> Any:
    """Get hosting package limits and quotas."""
    return await client.get(f"/package/{seg(params.package_id)}/limits")


@packages.tool()
async def get_hosting_package_usage(client: APIClient, params: PackageParams) -> Any:
    """Get hosting package usage statistics."""
    return await client.get(f"/package/{seg(params.package_id)}/web/usage")


@packages.tool()
async def get_package_types(client: APIClient, params: EmptyParams) -> Any:
    """Get the hosting package types available to this reseller."""
    rid = await resolve_reseller_id(client)
    return await client.get(f"/reseller/{seg(rid)}/packageTypes")


@packages.tool(read_only=False)
async def create_hosting_package(client: APIClient, params: CreatePackageParams) -> Any:
    """Create a new hosting package."""
    rid = await resolve_reseller_id(client)
    body = params.model_dump(by_alias=True, exclude_none=True, exclude={"stack_user"})
    if params.stack_user is not None:
        body["stackUser"] = params.stack_user
    return await client.post(f"/reseller/{seg(rid)}/addWeb", body)


@packages.tool(read_only=False)
async def delete_hosting_package(client: APIClient, params: PackageParams) -> Any:
    """Delete a hosting package. This cannot be undone."""
    return await client.delete(f"/package/{seg(params.package_id)}")


@packages.tool(read_only=False)
async def suspend_package(client: APIClient, params: SuspendPackageParams) -> Any:
    """Suspend a hosting package."""
    body = {"reason": params.reason} if params.reason else {}
    return await client.post(f"/package/{seg(params.package_id)}/suspend", body)


@packages.tool(read_only=False)
async def unsuspend_package(client: APIClient, params: PackageParams) -> Any:
    """Unsuspend a hosting package."""
    return await client.post(f"/package/{seg(params.package_id)}/unsuspend", {})


@packages.tool()
async def get_php_versions(client: APIClient, params: PackageParams) -> Any:
    """Get available PHP versions for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/phpVersion")


@packages.tool(read_only=False)
async def set_php_version(client: APIClient, params: PhpVersionParams) -> Any:
    """Set the PHP version for a hosting package."""
    return await client.post(f"/package/{seg(params.package_id)}/web/phpVersion", {"version": params.version})


@packages.tool()
async def list_ftp_users(client: APIClient, params: PackageParams) -> Any:
    """List all FTP users for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/ftp")


@packages.tool(read_only=False)
async def create_ftp_user(client: APIClient, params: CreateFtpUserParams) -> Any:
    """Create an FTP user for a hosting package."""
    return await client.post(
        f"/package/{seg(params.package_id)}/web/ftp",
        {"username": params.username, "password": params.password, "path": params.path},
    )
