"""Access to the external Pinterest scraper.

The scraping itself (browser automation, page parsing) is provided by a separate
package. This module only resolves the configured implementation and calls it.

Any object with a ``search(keyword, limit, headless)`` method qualifies; the method
may be synchronous or a coroutine, and should return a list of result mappings
with ``title``, ``image_url`` and ``link`` keys.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any, Optional, Protocol, runtime_checkable

from .config import get_settings

logger = logging.getLogger(__name__)


class ScraperLoadError(RuntimeError):
    """Raised when the configured scraper cannot be imported or instantiated."""


@runtime_checkable
class PinterestScraper(Protocol):
    def search(self, keyword: str, limit: int, headless: bool) -> Any: ...


_scraper: Optional[PinterestScraper] = None


def load_scraper(path: str) -> PinterestScraper:
    """Import ``module:attribute`` and return a ready scraper instance.

    Classes are instantiated with no arguments; anything else is used as-is.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ScraperLoadError(f"Invalid scraper path {path!r}, expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ScraperLoadError(f"Cannot import scraper module {module_name!r}: {e}") from e

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ScraperLoadError(f"Scraper {path!r} not found: {e}") from e

    scraper = target() if inspect.isclass(target) else target
    if not isinstance(scraper, PinterestScraper):
        raise ScraperLoadError(f"Scraper {path!r} has no search(keyword, limit, headless) method")
    logger.info("Loaded Pinterest scraper %s", path)
    return scraper


def get_scraper() -> PinterestScraper:
    """Return the process-wide scraper, loading it on first use."""
    global _scraper
    if _scraper is None:
        _scraper = load_scraper(get_settings().PINTEREST_SCRAPER)
    return _scraper


def set_scraper(scraper: Optional[PinterestScraper]) -> None:
    """Install a scraper explicitly (or reset to lazy loading with ``None``)."""
    global _scraper
    _scraper = scraper


async def run_search(keyword: str, limit: int, headless: bool) -> Any:
    """Call the scraper, awaiting the result when it is a coroutine."""
    result = get_scraper().search(keyword, limit, headless)
    if inspect.isawaitable(result):
        result = await result
    return result
