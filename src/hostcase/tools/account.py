"""Reseller account tools."""

from __future__ import annotations

from typing import Any

from hostcase.client import APIClient
from hostcase.foundation.core import ToolModule
from hostcase.foundation.errors import UpstreamStatusError
from hostcase.foundation.schema import EmptyParams

from ._common import reseller_record, resolve_reseller_id, seg

account = ToolModule("account")


def _zero_balance(message: str, **extra: Any) -> dict[str, Any]:
    return {"balance": 0, "currency": "USD", "message": message, **extra}


@account.tool()
async def get_reseller_info(client: APIClient, params: EmptyParams) -> Any:
    """Get reseller account information, including the reseller ID."""
    return reseller_record(await client.get("/reseller"))


@account.tool()
async def get_account_balance(client: APIClient, params: EmptyParams) -> Any:
    """Get the account balance and billing information.

    New and zero-balance accounts answer 404/403 or an empty body; those are
    reported as a zero balance rather than an error.
    """
    rid = await resolve_reseller_id(client)
    try:
        balance = await client.get(f"/reseller/{seg(rid)}/accountBalance")
    except UpstreamStatusError as e:
        if e.status_code in (403, 404):
            return _zero_balance(
                "Balance information not available - account may have zero balance or no payment history",
                resellerId=rid,
            )
        raise
    if not balance:
        return _zero_balance("Account has zero balance or no balance information available")
    return balance
