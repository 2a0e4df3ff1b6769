"""Tolerant argument normalization for the Pinterest search tool.

MCP clients do not always send well-formed arguments. Depending on the client,
the search arguments may arrive as:

- a proper dictionary: ``{"keyword": "cats", "limit": 5}``
- a dictionary whose keys are wrapped in backticks: ``{"`keyword`": "cats"}``
- a JSON string, sometimes with single quotes or unquoted keys
- a loose ``key: value`` string such as ``` `keyword`: `sunset`, `limit`: 5 ```

Each shape is handled by a small extraction strategy returning whatever fields it
could recover. ``normalize_search_args`` runs the strategies in order, keeps the
first value found for every field and fills the gaps with the configured defaults,
so it never raises.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pinterest_mcp.config import (
    DEFAULT_HEADLESS_MODE,
    DEFAULT_SEARCH_KEYWORD,
    DEFAULT_SEARCH_LIMIT,
)

logger = logging.getLogger(__name__)

# Partial result of a single strategy: any subset of keyword/limit/headless.
Partial = Dict[str, Any]
Strategy = Callable[[Any], Optional[Partial]]

FIELDS = ("keyword", "limit", "headless")

# Hosts that send ``params.args`` instead of ``params.arguments`` end up wrapping
# the real payload one level deeper.
_WRAPPER_KEYS = ("args", "arguments")

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
_BARE_KEY_RE = re.compile(r"(\w+):")
_KEYWORD_RE = re.compile(r"[\"`']?keyword[\"`']?\s*[:=]\s*[\"`']([^\"`']+)[\"`']", re.IGNORECASE)
_LIMIT_RE = re.compile(r"[\"`']?limit[\"`']?\s*[:=]\s*(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class SearchQuery:
    """Fully populated search parameters handed to the scraper."""

    keyword: str
    limit: int
    headless: bool


# ---------------------------------------------------------------------------
# Preprocessing
# ---------------------------------------------------------------------------


def replace_backticks(text: str) -> str:
    """Turn backticks into double quotes.

    Some upstream callers quote JSON keys and values with backticks. Kept as a
    separate step so it can be dropped once those callers are fixed.
    """
    return text.replace("`", '"')


def unwrap_arguments(raw: Any) -> Any:
    """Return the payload nested under a lone ``args``/``arguments`` key, if any."""
    if isinstance(raw, Mapping) and len(raw) == 1:
        key = next(iter(raw))
        if key in _WRAPPER_KEYS and isinstance(raw[key], (str, Mapping)):
            return raw[key]
    return raw


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _coerce_keyword(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _coerce_loose_keyword(value: Any) -> Optional[str]:
    # Backtick-keyed values come from a caller that also mangles types: {"`keyword`": 123}
    if value is None or isinstance(value, (Mapping, list)):
        return None
    if isinstance(value, bool):
        value = str(value).lower()
    return _coerce_keyword(str(value))


def _coerce_limit(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        # Leading-integer semantics: "12", " 12 ", "12abc" all give 12.
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return None


def _coerce_headless(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


_COERCERS: Dict[str, Callable[[Any], Any]] = {
    "keyword": _coerce_keyword,
    "limit": _coerce_limit,
    "headless": _coerce_headless,
}


# ---------------------------------------------------------------------------
# Extraction strategies
# ---------------------------------------------------------------------------


def from_mapping(raw: Any) -> Optional[Partial]:
    """Read fields from a dictionary, accepting backtick-wrapped key spellings."""
    if not isinstance(raw, Mapping):
        return None
    found: Partial = {}
    for field in FIELDS:
        for key in (field, f"`{field}`"):
            if key not in raw:
                continue
            coerce = _COERCERS[field]
            if key != field and field == "keyword":
                coerce = _coerce_loose_keyword
            value = coerce(raw[key])
            if value is not None:
                found[field] = value
                logger.debug("Found %s in object (key %r): %r", field, key, value)
                break
    return found


def from_json(raw: Any) -> Optional[Partial]:
    """Strict JSON object parse."""
    if not isinstance(raw, str):
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.debug("Standard JSON parse failed")
        return None
    if not isinstance(parsed, dict):
        return None
    return from_mapping(parsed)


def repair_json(text: str) -> str:
    """Fix the usual hand-written JSON mistakes: single quotes and bare keys."""
    return _BARE_KEY_RE.sub(r'"\1":', text.replace("'", '"'))


def from_repaired_json(raw: Any) -> Optional[Partial]:
    """JSON parse after quote repair."""
    if not isinstance(raw, str):
        return None
    fixed = repair_json(raw)
    logger.debug("Attempting to parse fixed JSON: %s", fixed)
    return from_json(fixed)


def from_patterns(raw: Any) -> Optional[Partial]:
    """Last resort: pull ``keyword`` and ``limit`` out with regular expressions."""
    if not isinstance(raw, str):
        return None
    found: Partial = {}
    keyword_match = _KEYWORD_RE.search(raw)
    if keyword_match:
        keyword = _coerce_keyword(keyword_match.group(1))
        if keyword is not None:
            found["keyword"] = keyword
            logger.debug("Found keyword using regex: %s", keyword)
    limit_match = _LIMIT_RE.search(raw)
    if limit_match:
        found["limit"] = int(limit_match.group(1))
        logger.debug("Found limit using regex: %s", found["limit"])
    return found


STRATEGIES: tuple[Strategy, ...] = (
    from_mapping,
    from_json,
    from_repaired_json,
    from_patterns,
)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


def collect_fields(raw: Any, strategies: tuple[Strategy, ...] = STRATEGIES) -> Partial:
    """Fold strategies left to right, keeping the first value found per field."""
    merged: Partial = {}
    for strategy in strategies:
        if all(field in merged for field in FIELDS):
            break
        partial = strategy(raw)
        if not partial:
            continue
        for field, value in partial.items():
            merged.setdefault(field, value)
    return merged


def normalize_search_args(raw: Any) -> SearchQuery:
    """
    Normalize raw ``pinterest_search`` arguments into a SearchQuery.

    Never raises: anything that cannot be recovered falls back to
    DEFAULT_SEARCH_KEYWORD, DEFAULT_SEARCH_LIMIT and DEFAULT_HEADLESS_MODE.

    Args:
        raw: Tool arguments as received (dict, string, or None)

    Returns:
        SearchQuery with every field populated
    """
    raw = unwrap_arguments(raw)
    if isinstance(raw, str):
        raw = replace_backticks(raw)
        logger.debug("Normalized args string: %s", raw)

    fields = collect_fields(raw) if raw else {}

    keyword = fields.get("keyword")
    if not keyword:
        keyword = DEFAULT_SEARCH_KEYWORD
        logger.debug("No keyword provided, using default keyword: %s", keyword)

    limit = fields.get("limit")
    if limit is None or limit <= 0:
        limit = DEFAULT_SEARCH_LIMIT
        logger.debug("Invalid limit, using default limit: %s", limit)

    headless = fields.get("headless", DEFAULT_HEADLESS_MODE)

    logger.debug("Final parameters - keyword: %s limit: %s headless: %s", keyword, limit, headless)
    return SearchQuery(keyword=keyword, limit=limit, headless=headless)
