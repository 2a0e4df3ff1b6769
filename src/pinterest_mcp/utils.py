"""Common utility helpers for the Pinterest MCP tools."""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, List

from mcp.types import TextContent

logger = logging.getLogger("pinterest_mcp")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout is reserved for the MCP stdio transport."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


# ---------------------------------------------------------------------------
# Decorator to convert handler exceptions to a text content block
# ---------------------------------------------------------------------------

def handle_tool_errors(
    message_prefix: str,
    *,
    passthrough: tuple[type[BaseException], ...] = (),
) -> Callable[[Callable], Callable]:
    """Wrap a tool handler so failures come back as a single error text block.

    The MCP call itself still succeeds; the caller reads the error as tool output.
    Exceptions listed in ``passthrough`` are re-raised untouched.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> List[TextContent]:
            try:
                return await func(*args, **kwargs)
            except passthrough:
                raise
            except Exception as e:
                logger.error("Error in %s: %s", func.__name__, e)
                return [TextContent(type="text", text=f"{message_prefix}: {e}")]

        return wrapper

    return decorator
