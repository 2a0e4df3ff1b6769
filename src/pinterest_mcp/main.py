import signal
import sys

import anyio
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from pinterest_mcp.config import settings
from pinterest_mcp.registry import register_all
from pinterest_mcp.utils import configure_logging, logger


def create_server() -> Server:
    """Build the MCP server with every tool handler registered."""
    server: Server = Server(settings.MCP_SERVER_NAME, version=settings.MCP_SERVER_VERSION)
    register_all(server)
    return server


async def _close_on_signal(scope: anyio.CancelScope) -> None:
    try:
        receiver = anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM)
    except NotImplementedError:  # pragma: no cover - Windows
        return
    with receiver as signals:
        async for signum in signals:
            logger.info("Received %s, closing server", signal.Signals(signum).name)
            scope.cancel()
            return


async def serve() -> None:
    server = create_server()
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Pinterest MCP server running via stdio")
        async with anyio.create_task_group() as tg:
            tg.start_soon(_close_on_signal, tg.cancel_scope)
            await server.run(read_stream, write_stream, server.create_initialization_options())
            tg.cancel_scope.cancel()


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    try:
        anyio.run(serve)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error("Failed to run server: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
