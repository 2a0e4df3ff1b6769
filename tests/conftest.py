from __future__ import annotations

from typing import Any

import pytest

from pinterest_mcp import scraper


class FakeScraper:
    """Records calls and returns canned results (or raises)."""

    def __init__(self, results: Any = None, error: Exception | None = None) -> None:
        self.results = [] if results is None else results
        self.error = error
        self.calls: list[tuple[str, int, bool]] = []

    def search(self, keyword: str, limit: int, headless: bool) -> Any:
        self.calls.append((keyword, limit, headless))
        if self.error is not None:
            raise self.error
        return self.results


class AsyncFakeScraper(FakeScraper):
    async def search(self, keyword: str, limit: int, headless: bool) -> Any:  # type: ignore[override]
        return super().search(keyword, limit, headless)


@pytest.fixture(autouse=True)
def _reset_scraper():
    yield
    scraper.set_scraper(None)


@pytest.fixture
def install_scraper():
    def _install(instance: Any) -> Any:
        scraper.set_scraper(instance)
        return instance

    return _install


def texts(blocks: list[Any]) -> list[str]:
    return [block.text for block in blocks]
