"""Pinterest image search exposed as an MCP server."""

__version__ = "1.0.0"
