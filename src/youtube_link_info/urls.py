"""YouTube URL recognition and video ID extraction."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)

SHORT_LINK_HOST = "youtu.be"
VIDEO_HOSTS = frozenset({"youtube.com", "www.youtube.com"})
MONITORED_HOSTS = frozenset({SHORT_LINK_HOST, *VIDEO_HOSTS})
EMBED_PREFIX = "/embed/"


def extract_video_id(url: str) -> str | None:
    """Extract the video ID from a single-video YouTube URL.

    Handles:
    - youtu.be/<id> (short links)
    - youtube.com/watch?v=<id>, with or without ``www.``
    - youtube.com/embed/<id>

    Channel pages, search results and anything not on a YouTube host
    yield None, as does a URL that cannot be parsed.
    """
    try:
        parsed = urlsplit(url.strip())
        host = (parsed.hostname or "").lower()
    except ValueError:
        logger.debug("Unparsable URL %r", url)
        return None
    logger.debug("Parsed %r: host=%r path=%r query=%r", url, host, parsed.path, parsed.query)

    if host == SHORT_LINK_HOST:
        path = parsed.path
        if path.startswith("/"):
            path = path[1:]
        return path or None

    if host not in VIDEO_HOSTS:
        return None

    if parsed.query:
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        if video_id:
            return video_id

    if parsed.path.startswith(EMBED_PREFIX):
        return parsed.path[len(EMBED_PREFIX):] or None
    return None
