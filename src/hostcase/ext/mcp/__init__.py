"""Model Context Protocol server adapter."""

from .server import MCPServer, call_tool, create_mcp_server, list_tool_specs, render_text, serve_mcp, tool_spec

__all__ = ["MCPServer", "call_tool", "create_mcp_server", "list_tool_specs", "render_text", "serve_mcp", "tool_spec"]
