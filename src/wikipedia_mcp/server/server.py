"""Expose the tool dispatcher as an MCP server over stdio."""

import json
from typing import List

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from .. import __version__
from ..config import Settings
from ..logger import get_logger
from ..provider import WikipediaClient
from ..tools import ProtocolFault, ToolCallRequest, ToolDispatcher, ToolFailure, ToolOutcome, WikipediaTools

logger = get_logger(__name__)

__all__ = ["SERVER_NAME", "create_server", "to_call_tool_result", "serve"]

SERVER_NAME = "wikipedia-mcp-server"


def to_call_tool_result(outcome: ToolOutcome) -> types.CallToolResult:
    """Collapse a dispatcher outcome into the MCP wire shape.

    Args:
        outcome: The tagged result of a tool call.

    Returns:
        A tool result, flagged with ``isError`` for business errors.

    Raises:
        McpError: For protocol faults, so the client receives a JSON-RPC error.
    """
    if isinstance(outcome, ProtocolFault):
        raise McpError(types.ErrorData(code=outcome.code, message=outcome.message))
    if isinstance(outcome, ToolFailure):
        return types.CallToolResult(content=[types.TextContent(type="text", text=outcome.message)], isError=True)
    text = json.dumps(outcome.payload, indent=2, ensure_ascii=False)
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)], isError=False)


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build the low-level MCP server around a dispatcher.

    The request handlers are installed directly so that protocol faults
    surface as JSON-RPC errors instead of error-flagged tool results.

    Args:
        dispatcher: The dispatcher answering tool requests.

    Returns:
        The configured, not yet running, server.
    """
    server: Server = Server(SERVER_NAME, version=__version__)
    tools: List[types.Tool] = [descriptor.to_mcp() for descriptor in dispatcher.list_tools()]

    async def handle_list_tools(_: types.ListToolsRequest) -> types.ServerResult:
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        request = ToolCallRequest(name=req.params.name, arguments=req.params.arguments)
        outcome = await dispatcher.call_tool(request)
        return types.ServerResult(to_call_tool_result(outcome))

    server.request_handlers[types.ListToolsRequest] = handle_list_tools
    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server


async def serve(settings: Settings) -> None:
    """Run the server on stdin/stdout until the client disconnects.

    Args:
        settings: Provider language, user agent and timeout.
    """
    async with WikipediaClient(settings) as provider:
        dispatcher = ToolDispatcher(WikipediaTools(provider).build_registry())
        server = create_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Wikipedia MCP server running on stdio (language=%s)", settings.language)
            await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("Wikipedia MCP server stopped.")
