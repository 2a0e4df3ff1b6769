import logging
from typing import Any, Awaitable, Callable, Dict, List

from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolRequestParams,
    CallToolResult,
    ErrorData,
    ServerResult,
    TextContent,
    Tool,
)

from pinterest_mcp.tools import pinterest

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[List[TextContent]]]

TOOL_HANDLERS: Dict[str, ToolHandler] = {
    pinterest.SEARCH_TOOL: pinterest.pinterest_search,
    pinterest.IMAGE_INFO_TOOL: pinterest.pinterest_get_image_info,
}


def list_tools() -> List[Tool]:
    """Return the descriptors of every exposed tool."""
    return list(pinterest.TOOLS)


async def call_tool(name: str, arguments: Any) -> List[TextContent]:
    """Dispatch a tool call by name.

    Raises:
        McpError: METHOD_NOT_FOUND for unknown tools, INTERNAL_ERROR when a
            handler fails unexpectedly.
    """
    logger.debug("Received tool call %s with arguments: %r", name, arguments)
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))
    try:
        return await handler(arguments)
    except Exception as e:
        logger.error("[Tool call error] %s: %s", name, e)
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=f"Tool call failed: {e}")) from e


def request_arguments(params: CallToolRequestParams) -> Any:
    """Return the call arguments, preferring a non-standard ``params.args`` field."""
    extra = params.model_extra or {}
    return extra.get("args") or params.arguments


def register_all(server: Server) -> None:
    """Attach the tool list and tool call handlers to a low-level MCP server.

    The tool call handler is installed directly rather than through
    ``server.call_tool()``: that decorator validates arguments against the input
    schema and turns every exception into an error result, while loosely
    formatted arguments must reach the normalizer and McpError must go back to
    the client as a JSON-RPC error.
    """

    @server.list_tools()
    async def _list_tools() -> List[Tool]:
        return list_tools()

    async def _call_tool(req: CallToolRequest) -> ServerResult:
        blocks = await call_tool(req.params.name, request_arguments(req.params))
        return ServerResult(CallToolResult(content=blocks, isError=False))

    server.request_handlers[CallToolRequest] = _call_tool
