from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from incident_analysis import __version__
from incident_analysis.contracts import OperationResult, TextContent
from incident_analysis.dispatch import ToolDispatcher
from incident_analysis.errors import ExecutionFailedError, UnknownOperationError

LOGGER = logging.getLogger(__name__)

SERVER_NAME = "incident-analysis-mcp"

McpContent = types.TextContent | types.ImageContent


def tool_definitions(dispatcher: ToolDispatcher) -> list[types.Tool]:
    return [
        types.Tool(
            name=operation.name,
            description=operation.description,
            inputSchema=operation.input_schema(),
        )
        for operation in dispatcher.operations
    ]


def to_mcp_content(result: OperationResult) -> list[McpContent]:
    content: list[McpContent] = []
    for item in result.content:
        if isinstance(item, TextContent):
            content.append(types.TextContent(type="text", text=item.text))
        else:
            content.append(types.ImageContent(type="image", data=item.data, mimeType=item.mime_type))
    return content


async def handle_call_tool(
    dispatcher: ToolDispatcher,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[McpContent]:
    try:
        result = await dispatcher.call(name, arguments)
    except UnknownOperationError as exc:
        raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(exc))) from exc
    except ExecutionFailedError as exc:
        raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message=str(exc))) from exc
    return to_mcp_content(result)


def build_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tool_definitions(dispatcher)

    # McpError must surface as a JSON-RPC error, not as an isError tool result.
    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        content = await handle_call_tool(dispatcher, request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve_stdio(dispatcher: ToolDispatcher) -> None:
    server = build_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        LOGGER.info("Incident analysis MCP server started (%d tools)", len(dispatcher.names))
        await server.run(read_stream, write_stream, server.create_initialization_options())
