"""MCP server adapter for hostcase.

Publishes every registered tool to MCP clients (Claude Desktop, Cursor,
VS Code). Calls are not executed here: each one is routed through
Dispatcher.dispatch, so MCP callers get the same validation, error
normalization and envelope as any other caller.

Example:
    >>> dispatcher = build_dispatcher()
    >>> serve_mcp(dispatcher)                      # stdio, for desktop clients
    >>> serve_mcp(dispatcher, transport="sse", port=8080)

Requires: fastmcp
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

import orjson

from hostcase.foundation.errors import JsonDict, ResultEnvelope

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from hostcase.foundation.core import ToolDescriptor
    from hostcase.foundation.registry import ToolRegistry
    from hostcase.runtime.dispatch import Dispatcher

Transport = Literal["stdio", "sse", "streamable-http"]


def tool_spec(descriptor: ToolDescriptor) -> JsonDict:
    """MCP listing entry for one tool."""
    return {
        "name": descriptor.name,
        "description": descriptor.description,
        "inputSchema": descriptor.input_schema,
    }


def list_tool_specs(registry: ToolRegistry) -> list[JsonDict]:
    """Listing payload for every tool, in registry order."""
    return [tool_spec(d) for d in registry.list()]


def render_text(envelope: ResultEnvelope) -> str:
    """Text content for an MCP reply: pretty JSON data, or the rendered error."""
    if envelope.ok:
        return orjson.dumps(envelope.data, option=orjson.OPT_INDENT_2).decode()
    assert envelope.error is not None
    return envelope.error.render()


async def call_tool(dispatcher: Dispatcher, name: str, arguments: dict[str, Any] | None) -> ResultEnvelope:
    """Entry point for one MCP tools/call."""
    return await dispatcher.dispatch(name, arguments or {})


class MCPServer:
    """FastMCP-backed server for MCP clients.

    Example:
        >>> server = MCPServer(dispatcher, "hostcase")
        >>> server.run(transport="sse", port=8080)
    """

    __slots__ = ("_name", "_dispatcher", "_mcp")

    def __init__(self, dispatcher: Dispatcher, name: str = "hostcase") -> None:
        self._name = name
        self._dispatcher = dispatcher
        self._mcp = self._create_server()

    @property
    def name(self) -> str:
        return self._name

    @property
    def fastmcp(self) -> FastMCP:
        return self._mcp

    def _create_server(self) -> FastMCP:
        from fastmcp import FastMCP

        mcp = FastMCP(self._name)
        tool_cls = _dispatching_tool_class()
        for descriptor in self._dispatcher.registry.list():
            mcp.add_tool(tool_cls(
                name=descriptor.name,
                description=descriptor.description,
                parameters=descriptor.input_schema,
                dispatcher=self._dispatcher,
            ))
        return mcp

    def run(self, transport: Transport = "stdio", *, host: str = "127.0.0.1", port: int = 8080) -> None:
        """Start serving (blocking).

        Args:
            transport: "stdio" (desktop clients), "sse" or "streamable-http"
            host: Host for HTTP transports
            port: Port for HTTP transports
        """
        if transport == "stdio":
            self._mcp.run()
        else:
            self._mcp.run(transport=transport, host=host, port=port)


def _dispatching_tool_class() -> type:
    """fastmcp Tool subclass whose run() goes through the Dispatcher."""
    from fastmcp.tools import Tool
    from fastmcp.tools.tool import ToolResult
    from pydantic import Field

    class DispatchingTool(Tool):
        dispatcher: Any = Field(exclude=True, repr=False)

        async def run(self, arguments: dict[str, Any]) -> ToolResult:
            envelope = await call_tool(self.dispatcher, self.name, arguments)
            return ToolResult(content=render_text(envelope), structured_content=envelope.to_dict())

    return DispatchingTool


def create_mcp_server(dispatcher: Dispatcher, name: str = "hostcase") -> FastMCP:
    """FastMCP server with one tool per descriptor, not yet running."""
    return MCPServer(dispatcher, name).fastmcp


def serve_mcp(
    dispatcher: Dispatcher,
    *,
    name: str = "hostcase",
    transport: Transport = "stdio",
    host: str = "127.0.0.1",
    port: int = 8080,
) -> None:
    """Expose the catalogue over MCP (blocking)."""
    MCPServer(dispatcher, name).run(transport=transport, host=host, port=port)


def main() -> None:
    """Console entry point: configure from the environment and serve over stdio."""
    from hostcase.app import build_dispatcher, configure_from_settings
    from hostcase.foundation.config import get_settings

    settings = get_settings()
    configure_from_settings(settings)
    serve_mcp(build_dispatcher(settings))
