"""Build YouTube Data API ``videos.list`` requests for a video ID."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import urlencode

from .bus import MessageQueue
from .config import DEFAULT_API_URL
from .models import MetadataRequest, UrlEvent

API_PARTS = ("id", "snippet", "contentDetails", "statistics")


def build_api_url(video_id: str, api_key: str, base_url: str = DEFAULT_API_URL) -> str:
    """Return the query URL for one video.

    >>> build_api_url("HFuTvTVAO-M", "KEY")
    'https://www.googleapis.com/youtube/v3/videos?id=HFuTvTVAO-M&key=KEY&part=id%2Csnippet%2CcontentDetails%2Cstatistics'
    """
    query = urlencode({
        "id": video_id,
        "key": api_key,
        "part": ",".join(API_PARTS),
    })
    return f"{base_url}?{query}"


def build_request(
    video_id: str,
    event: UrlEvent,
    queue: MessageQueue,
    on_resolved: Callable[[MetadataRequest, str], None],
    on_rejected: Callable[[MetadataRequest, str], None],
    *,
    api_key: str,
    base_url: str = DEFAULT_API_URL,
) -> MetadataRequest:
    """Describe the lookup for *video_id* without sending it."""
    return MetadataRequest(
        url=build_api_url(video_id, api_key, base_url),
        video_id=video_id,
        event=event,
        queue=queue,
        on_resolved=on_resolved,
        on_rejected=on_rejected,
    )
