"""MCP server binding."""

from .server import SERVER_NAME, create_server, to_call_tool_result, serve

__all__ = ["SERVER_NAME", "create_server", "to_call_tool_result", "serve"]
