"""MySQL and MSSQL database tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.schema import NonEmptyStr

from ._common import PackageParams, seg

databases = ToolModule("databases")


class CreateDatabaseParams(PackageParams):
    name: NonEmptyStr = Field(description="The database name")


class CreateDatabaseUserParams(PackageParams):
    username: NonEmptyStr = Field(description="The username for the MySQL user")
    password: NonEmptyStr = Field(description="The password for the MySQL user")


@databases.tool()
async def get_mysql_databases(client: APIClient, params: PackageParams) -> Any:
    """Get MySQL databases for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/mysqlDatabases")


@databases.tool()
async def get_mysql_users(client: APIClient, params: PackageParams) -> Any:
    """Get MySQL users for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/mysqlUsers")


@databases.tool()
async def get_mssql_databases(client: APIClient, params: PackageParams) -> Any:
    """Get MSSQL databases for a hosting package."""
    return await client.get(f"/package/{seg(params.package_id)}/web/mssqlDatabases")


@databases.tool(read_only=False)
async def create_mysql_database(client: APIClient, params: CreateDatabaseParams) -> Any:
    """Create a MySQL database for a hosting package."""
    return await client.post(f"/package/{seg(params.package_id)}/web/mysqlDatabases", {"name": params.name})


@databases.tool(read_only=False)
async def create_mysql_user(client: APIClient, params: CreateDatabaseUserParams) -> Any:
    """Create a MySQL user for a hosting package."""
    return await client.post(
        f"/package/{seg(params.package_id)}/web/mysqlUsers",
        {"username": params.username, "password": params.password},
    )
