from __future__ import annotations

import json
import re

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, METHOD_NOT_FOUND, CallToolRequestParams

from pinterest_mcp import registry
from pinterest_mcp.config import settings
from pinterest_mcp.tools import pinterest

from conftest import AsyncFakeScraper, FakeScraper, texts


@pytest.fixture
def strict_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "PINTEREST_SWALLOW_SEARCH_ERRORS", False)


def test_list_tools_descriptors() -> None:
    tools = {tool.name: tool for tool in registry.list_tools()}
    assert set(tools) == {"pinterest_search", "pinterest_get_image_info"}

    search_schema = tools["pinterest_search"].inputSchema
    assert search_schema["required"] == ["keyword"]
    assert search_schema["properties"]["limit"]["default"] == 10
    assert search_schema["properties"]["headless"]["default"] is True

    info_schema = tools["pinterest_get_image_info"].inputSchema
    assert info_schema["required"] == ["image_url"]


@pytest.mark.asyncio
async def test_search_with_no_results_uses_default_keyword(install_scraper) -> None:
    fake = install_scraper(FakeScraper())
    blocks = await registry.call_tool("pinterest_search", {})
    assert texts(blocks) == ['Found 0 images related to "landscape" on Pinterest']
    assert fake.calls == [("landscape", 10, True)]


@pytest.mark.asyncio
async def test_search_formats_and_sanitizes_results(install_scraper) -> None:
    fake = install_scraper(
        FakeScraper(
            [
                {"title": "Beach", "image_url": "https://i.pinimg.com/236x/a.jpg", "link": "https://www.pinterest.com/pin/1/"},
                {"title": "Dunes", "image_url": "https://i.pinimg.com/originals/b.jpg"},
            ]
        )
    )
    blocks = await registry.call_tool("pinterest_search", {"keyword": " beach ", "limit": "2", "headless": False})
    assert fake.calls == [("beach", 2, False)]
    assert texts(blocks) == [
        'Found 2 images related to "beach" on Pinterest',
        "Image 1: Beach",
        "Link: https://i.pinimg.com/originals/a.jpg",
        "Original page: https://www.pinterest.com/pin/1/",
        "---",
        "Image 2: Dunes",
        "Link: https://i.pinimg.com/originals/b.jpg",
    ]


@pytest.mark.asyncio
async def test_search_accepts_stringified_arguments(install_scraper) -> None:
    fake = install_scraper(AsyncFakeScraper([{"title": "t", "image_url": "https://img/x.jpg"}]))
    blocks = await registry.call_tool("pinterest_search", {"args": "`keyword`: `sunset`, `limit`: 5"})
    assert fake.calls == [("sunset", 5, True)]
    assert blocks[0].text == 'Found 1 images related to "sunset" on Pinterest'


@pytest.mark.asyncio
async def test_scraper_error_becomes_empty_result(install_scraper) -> None:
    install_scraper(FakeScraper(error=RuntimeError("browser crashed")))
    blocks = await registry.call_tool("pinterest_search", {"keyword": "cats"})
    assert texts(blocks) == ['Found 0 images related to "cats" on Pinterest']


@pytest.mark.asyncio
async def test_non_list_result_becomes_empty_result(install_scraper) -> None:
    install_scraper(FakeScraper({"unexpected": "shape"}))
    blocks = await registry.call_tool("pinterest_search", {"keyword": "cats"})
    assert texts(blocks) == ['Found 0 images related to "cats" on Pinterest']


@pytest.mark.asyncio
async def test_unloadable_scraper_becomes_empty_result(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "PINTEREST_SCRAPER", "no_such_scraper_module:Scraper")
    blocks = await registry.call_tool("pinterest_search", {"keyword": "cats"})
    assert texts(blocks) == ['Found 0 images related to "cats" on Pinterest']


@pytest.mark.asyncio
async def test_strict_mode_surfaces_scraper_error(install_scraper, strict_mode) -> None:
    install_scraper(FakeScraper(error=RuntimeError("browser crashed")))
    with pytest.raises(McpError) as exc:
        await registry.call_tool("pinterest_search", {"keyword": "cats"})
    assert exc.value.error.code == INTERNAL_ERROR
    assert "browser crashed" in exc.value.error.message
    assert exc.value.error.message.startswith("Tool call failed:")


@pytest.mark.asyncio
async def test_strict_mode_rejects_non_list_result(install_scraper, strict_mode) -> None:
    install_scraper(FakeScraper("oops"))
    with pytest.raises(McpError) as exc:
        await registry.call_tool("pinterest_search", {"keyword": "cats"})
    assert exc.value.error.code == INTERNAL_ERROR


@pytest.mark.asyncio
async def test_unexpected_search_failure_is_reported_as_text(
    install_scraper, monkeypatch: pytest.MonkeyPatch
) -> None:
    install_scraper(FakeScraper([{"title": "t"}]))

    def _boom(keyword, results):
        raise ValueError("render failed")

    monkeypatch.setattr(pinterest, "build_search_content", _boom)
    blocks = await registry.call_tool("pinterest_search", {"keyword": "cats"})
    assert texts(blocks) == ["Error during search: render failed"]


@pytest.mark.asyncio
async def test_unknown_tool_is_method_not_found() -> None:
    with pytest.raises(McpError) as exc:
        await registry.call_tool("unknown_tool", {})
    assert exc.value.error.code == METHOD_NOT_FOUND
    assert exc.value.error.message == "Unknown tool: unknown_tool"


@pytest.mark.asyncio
async def test_handler_crash_becomes_internal_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _crash(arguments):
        raise RuntimeError("kaboom")

    monkeypatch.setitem(registry.TOOL_HANDLERS, "pinterest_search", _crash)
    with pytest.raises(McpError) as exc:
        await registry.call_tool("pinterest_search", {})
    assert exc.value.error.code == INTERNAL_ERROR
    assert exc.value.error.message == "Tool call failed: kaboom"


@pytest.mark.asyncio
async def test_image_info_echoes_url() -> None:
    blocks = await registry.call_tool(
        "pinterest_get_image_info", {"image_url": "https://i.pinimg.com/originals/a.jpg"}
    )
    assert len(blocks) == 2
    assert blocks[0].text == "Pinterest Image Information"
    info = json.loads(blocks[1].text)
    assert info["image_url"] == "https://i.pinimg.com/originals/a.jpg"
    assert info["source"] == "Pinterest"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", info["timestamp"])


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", [{}, {"url": "https://x"}, "https://x", None])
async def test_image_info_requires_image_url(arguments) -> None:
    blocks = await registry.call_tool("pinterest_get_image_info", arguments)
    assert texts(blocks) == ["Error getting image info: image_url is required"]


def test_request_arguments_prefers_params_args() -> None:
    params = CallToolRequestParams(name="pinterest_search", arguments={"keyword": "a"}, args="`keyword`: `b`")
    assert registry.request_arguments(params) == "`keyword`: `b`"
    assert registry.request_arguments(CallToolRequestParams(name="x", arguments={"keyword": "a"})) == {"keyword": "a"}
    assert registry.request_arguments(CallToolRequestParams(name="x")) is None
