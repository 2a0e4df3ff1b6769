"""Pinterest MCP tools.

This package contains the MCP tool implementations exposed by the Pinterest MCP server.

Architecture:
- pinterest.py: tool descriptors and handlers (pinterest_search, pinterest_get_image_info)
- params_utils.py: tolerant normalization of search arguments
- media.py: thumbnail URL rewriting and result formatting
"""

from __future__ import annotations

__all__ = [
    "media",
    "params_utils",
    "pinterest",
]
