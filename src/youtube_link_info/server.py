"""FastMCP server — exposes the link summary as a single tool."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .bus import EventBus
from .config import get_config
from .errors import InvalidUrlError, LinkInfoError, make_tool_error
from .plugin import YouTubePlugin
from .request_builder import build_api_url
from .transport import HttpTransport
from .urls import extract_video_id

logger = logging.getLogger(__name__)

YouTubeUrl = Annotated[str, Field(min_length=10, description="YouTube video URL (youtube.com or youtu.be)")]
ResponseFormat = Annotated[str | None, Field(
    description="Template with %link%, %title%, %author%, %published%, %duration%, %views%, ... placeholders",
)]

_transport: HttpTransport | None = None


def _get_transport() -> HttpTransport:
    """Lazily create the shared transport."""
    global _transport
    if _transport is None:
        _transport = HttpTransport(timeout=get_config().request_timeout)
    return _transport


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook — closes the shared HTTP client."""
    global _transport
    yield {}
    if _transport is not None:
        await _transport.aclose()
        _transport = None
        logger.info("Lifespan shutdown: closed HTTP transport")


app = FastMCP(
    "youtube-link-info",
    instructions=(
        "Summarise a YouTube video link — title, channel, length, publish "
        "date and view/like counts — as a single formatted line."
    ),
    lifespan=_lifespan,
)


@app.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    )
)
async def youtube_link_info(url: YouTubeUrl, response_format: ResponseFormat = None) -> dict:
    """Fetch a YouTube video's metadata and render it as one line.

    Costs 1 YouTube Data API unit.

    Args:
        url: YouTube video URL.
        response_format: Optional template overriding the configured one.

    Returns:
        Dict with video_id and message, or a ToolError dict.
    """
    video_id = extract_video_id(url)
    if not video_id:
        return make_tool_error(InvalidUrlError(f"Not a single-video YouTube URL: {url}"))

    try:
        cfg = get_config()
        if response_format is not None:
            cfg = cfg.model_copy(update={"response_format": response_format})
        plugin = YouTubePlugin(cfg, EventBus())
        request_url = build_api_url(video_id, cfg.key, cfg.api_url)
        body = await _get_transport().fetch(request_url)
        message = plugin.render_response(request_url, body)
    except LinkInfoError as exc:
        return make_tool_error(exc)
    except Exception as exc:
        logger.exception("youtube_link_info failed for %s", url)
        return make_tool_error(exc)

    return {"video_id": video_id, "message": message}


def main() -> None:
    """Entry-point for ``youtube-link-info`` console script."""
    app.run()


if __name__ == "__main__":
    main()
