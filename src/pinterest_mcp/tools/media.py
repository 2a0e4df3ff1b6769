"""Image URL clean-up and content shaping for Pinterest search results."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, MutableMapping
from typing import Any, List, Optional, Sequence

from mcp.types import TextContent

logger = logging.getLogger(__name__)

# Path segments Pinterest uses for scaled-down pin images
THUMBNAIL_MARKERS = ("/60x60/", "/236x/", "/474x/", "/736x/")
_THUMBNAIL_SEGMENT_RE = re.compile(r"/\d+x\d*/")
ORIGINALS_SEGMENT = "/originals/"


def _get(result: Any, name: str) -> Any:
    if isinstance(result, Mapping):
        return result.get(name)
    return getattr(result, name, None)


def _set(result: Any, name: str, value: Any) -> None:
    if isinstance(result, MutableMapping):
        result[name] = value
    else:
        setattr(result, name, value)


def is_thumbnail_url(url: str) -> bool:
    # Already rewritten; any leftover size segment is part of the original path.
    if ORIGINALS_SEGMENT in url:
        return False
    if any(marker in url for marker in THUMBNAIL_MARKERS):
        return True
    return _THUMBNAIL_SEGMENT_RE.search(url) is not None


def to_original_url(url: str) -> str:
    """Rewrite the first thumbnail size segment of ``url`` to ``/originals/``."""
    if not is_thumbnail_url(url):
        return url
    return _THUMBNAIL_SEGMENT_RE.sub(ORIGINALS_SEGMENT, url, count=1)


def sanitize_results(results: Sequence[Any]) -> Sequence[Any]:
    """Point every result's ``image_url`` at the full-resolution asset.

    Results are updated in place and the same sequence is returned.
    """
    for result in results:
        image_url = _get(result, "image_url")
        if not image_url or not isinstance(image_url, str):
            continue
        fixed = to_original_url(image_url)
        if fixed != image_url:
            logger.debug("Fixing thumbnail URL: %s -> %s", image_url, fixed)
            _set(result, "image_url", fixed)
    return results


def text_block(text: str) -> TextContent:
    return TextContent(type="text", text=text)


def build_search_content(keyword: str, results: Sequence[Any]) -> List[TextContent]:
    """Render search results as ordered text blocks.

    A summary block comes first, then per image a title, a link, the original page
    when it differs from the image, and a ``---`` separator between images.
    """
    blocks = [text_block(f'Found {len(results)} images related to "{keyword}" on Pinterest')]
    last = len(results) - 1
    for index, result in enumerate(results):
        title: Optional[str] = _get(result, "title")
        image_url: Optional[str] = _get(result, "image_url")
        link: Optional[str] = _get(result, "link")

        blocks.append(text_block(f"Image {index + 1}: {title or 'No title'}"))
        blocks.append(text_block(f"Link: {image_url or 'No link'}"))
        if link and link != image_url:
            blocks.append(text_block(f"Original page: {link}"))
        if index < last:
            blocks.append(text_block("---"))
    return blocks
