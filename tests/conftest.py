"""Shared test fixtures for youtube-link-info."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from youtube_link_info.config import PluginConfig
from youtube_link_info.models import UrlEvent

VIDEO_ID = "HFuTvTVAO-M"
REQUEST_URL = (
    "https://www.googleapis.com/youtube/v3/videos"
    "?id=HFuTvTVAO-M&key=KEY&part=id%2Csnippet%2CcontentDetails%2Cstatistics"
)


def unwrap_tool(tool: Any) -> Any:
    """Extract the raw coroutine from a FastMCP FunctionTool, if wrapped.

    FastMCP 2.x wraps @server.tool functions in FunctionTool (not callable).
    FastMCP 3.x preserves the original function. This helper works with both.
    """
    return getattr(tool, "fn", tool)


def video_item(**overrides: Any) -> dict:
    """A realistic ``videos.list`` item; top-level keys can be overridden."""
    item = {
        "kind": "youtube#video",
        "id": VIDEO_ID,
        "snippet": {
            "publishedAt": "2010-02-07T08:09:51.000Z",
            "channelId": "UCn6f4xvFnnGmvf5kNa3FvLw",
            "title": "Nick Motil - Butterflies (2010)",
            "channelTitle": "Nick Motil",
            "categoryId": "10",
        },
        "contentDetails": {
            "duration": "PT3M30S",
            "dimension": "2d",
            "definition": "sd",
        },
        "statistics": {
            "viewCount": "6283",
            "likeCount": "35",
            "dislikeCount": "0",
            "favoriteCount": "0",
            "commentCount": "27",
        },
    }
    item.update(overrides)
    return item


def videos_response(*items: dict) -> str:
    """Serialise a ``videos.list`` response body."""
    return json.dumps({
        "kind": "youtube#videoListResponse",
        "pageInfo": {"totalResults": len(items), "resultsPerPage": len(items)},
        "items": list(items),
    })


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/youtube-link-info/.env."""
    monkeypatch.setattr(
        "youtube_link_info.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture()
def clean_config():
    """Reset the config singleton between tests."""
    import youtube_link_info.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture()
def config() -> PluginConfig:
    return PluginConfig(key="KEY")


@pytest.fixture()
def emitter() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def queue() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def event() -> UrlEvent:
    return UrlEvent(url=f"http://youtu.be/{VIDEO_ID}", source="#channel")
