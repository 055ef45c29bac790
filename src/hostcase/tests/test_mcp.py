"""Tests for the MCP adapter: listing, rendering and calls routed through the Dispatcher."""

from __future__ import annotations

import orjson
import pytest

from conftest import MockUpstream, reply
from hostcase.ext.mcp import call_tool, create_mcp_server, list_tool_specs, render_text, tool_spec
from hostcase.foundation.errors import ErrorKind, ErrorRecord, ResultEnvelope
from hostcase.runtime import Dispatcher


# ═════════════════════════════════════════════════════════════════════════════
# Listing
# ═════════════════════════════════════════════════════════════════════════════


def test_specs_follow_registry_order(dispatcher: Dispatcher) -> None:
    specs = list_tool_specs(dispatcher.registry)
    assert [s["name"] for s in specs] == dispatcher.registry.names()
    assert len(specs) == 56


def test_spec_shape(dispatcher: Dispatcher) -> None:
    spec = tool_spec(dispatcher.registry.get("update_dns_record"))

    assert set(spec) == {"name", "description", "inputSchema"}
    schema = spec["inputSchema"]
    assert schema["type"] == "object"
    assert set(schema["required"]) == {"domain_id", "record_type", "name", "value"}
    assert schema["properties"]["ttl"]["default"] == 3600
    assert schema["additionalProperties"] is False


def test_empty_params_schema(dispatcher: Dispatcher) -> None:
    schema = tool_spec(dispatcher.registry.get("list_domains"))["inputSchema"]
    assert schema["properties"] == {}
    assert "required" not in schema


# ═════════════════════════════════════════════════════════════════════════════
# Rendering
# ═════════════════════════════════════════════════════════════════════════════


def test_render_success_is_json() -> None:
    text = render_text(ResultEnvelope.success({"balance": 12.5, "currency": "GBP"}))
    assert orjson.loads(text) == {"balance": 12.5, "currency": "GBP"}


def test_render_failure_is_readable() -> None:
    record = ErrorRecord.create(ErrorKind.RATE_LIMITED, "GET /domain was rate limited", http_status=429)
    text = render_text(ResultEnvelope.failure(record))
    assert text.startswith("[RateLimited] GET /domain was rate limited (HTTP 429)")
    assert "retrying later" in text


# ═════════════════════════════════════════════════════════════════════════════
# Calls
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_call_tool_uses_dispatcher(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    upstream.on("GET", "/package", reply(json=[{"id": 7}]))
    result = await call_tool(dispatcher, "list_hosting_packages", None)
    assert result.ok
    assert result.data == [{"id": 7}]


@pytest.mark.asyncio
async def test_call_tool_reports_validation(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    result = await call_tool(dispatcher, "get_hosting_package_info", {"package_id": ""})
    assert result.error.kind is ErrorKind.VALIDATION
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_fastmcp_roundtrip(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    from fastmcp import Client

    upstream.on("GET", "/domain", reply(json=["example.com"]))
    mcp = create_mcp_server(dispatcher)

    async with Client(mcp) as session:
        tools = await session.list_tools()
        result = await session.call_tool("list_domains", {})
        failure = await session.call_tool("get_dns_records", {})

    assert {t.name for t in tools} == set(dispatcher.registry.names())
    assert result.structured_content == {"ok": True, "data": ["example.com"]}
    assert orjson.loads(result.content[0].text) == ["example.com"]
    assert failure.structured_content["error"]["kind"] == "Validation"
