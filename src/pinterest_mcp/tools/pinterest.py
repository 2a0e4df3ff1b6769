"""Pinterest tools: image search and image info."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, List

from mcp.types import TextContent, Tool

from ..config import DEFAULT_HEADLESS_MODE, DEFAULT_SEARCH_LIMIT, get_settings
from ..scraper import run_search
from ..utils import handle_tool_errors
from .media import build_search_content, sanitize_results, text_block
from .params_utils import normalize_search_args

logger = logging.getLogger(__name__)

SEARCH_TOOL = "pinterest_search"
IMAGE_INFO_TOOL = "pinterest_get_image_info"
IMAGE_SOURCE = "Pinterest"


class SearchFailedError(RuntimeError):
    """The scraper failed and errors are configured to be surfaced."""


TOOLS: List[Tool] = [
    Tool(
        name=SEARCH_TOOL,
        description="Search for images on Pinterest by keyword",
        inputSchema={
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "description": "Search keyword",
                },
                "limit": {
                    "type": "integer",
                    "description": f"Number of images to return (default: {DEFAULT_SEARCH_LIMIT})",
                    "default": DEFAULT_SEARCH_LIMIT,
                },
                "headless": {
                    "type": "boolean",
                    "description": (
                        "Whether to use headless browser mode "
                        f"(default: {str(DEFAULT_HEADLESS_MODE).lower()})"
                    ),
                    "default": DEFAULT_HEADLESS_MODE,
                },
            },
            "required": ["keyword"],
        },
    ),
    Tool(
        name=IMAGE_INFO_TOOL,
        description="Get Pinterest image information",
        inputSchema={
            "type": "object",
            "properties": {
                "image_url": {
                    "type": "string",
                    "description": "Image URL",
                },
            },
            "required": ["image_url"],
        },
    ),
]


async def fetch_results(keyword: str, limit: int, headless: bool) -> list[Any]:
    """Run the scraper and return its results as a list.

    Scraper exceptions and non-list results count as "no results" unless
    PINTEREST_SWALLOW_SEARCH_ERRORS is disabled, in which case SearchFailedError
    is raised.
    """
    swallow = get_settings().PINTEREST_SWALLOW_SEARCH_ERRORS
    try:
        results = await run_search(keyword, limit, headless)
    except Exception as e:
        if not swallow:
            raise SearchFailedError(f"Pinterest search failed: {e}") from e
        logger.error("Search error: %s", e)
        return []

    if isinstance(results, (list, tuple)):
        return list(results)
    if not swallow:
        raise SearchFailedError(f"Scraper returned {type(results).__name__}, expected a list")
    logger.warning("Scraper returned %s instead of a list, treating as empty", type(results).__name__)
    return []


@handle_tool_errors("Error during search", passthrough=(SearchFailedError,))
async def pinterest_search(arguments: Any) -> List[TextContent]:
    """Search Pinterest and describe each image found."""
    query = normalize_search_args(arguments)
    logger.info("Searching Pinterest: %r (limit=%d, headless=%s)", query.keyword, query.limit, query.headless)

    results = await fetch_results(query.keyword, query.limit, query.headless)
    sanitize_results(results)
    return build_search_content(query.keyword, results)


@handle_tool_errors("Error getting image info")
async def pinterest_get_image_info(arguments: Any) -> List[TextContent]:
    """Echo an image URL back with its source and a timestamp. No network call is made."""
    if not isinstance(arguments, Mapping) or "image_url" not in arguments:
        raise ValueError("image_url is required")

    info = {
        "image_url": arguments["image_url"],
        "source": IMAGE_SOURCE,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
    return [
        text_block("Pinterest Image Information"),
        text_block(json.dumps(info, indent=2)),
    ]
