"""Reply to YouTube links with a one-line summary of the video.

Lifecycle of one observed URL:

1. ``handle_url`` extracts a video ID; non-video URLs are ignored silently.
2. A ``MetadataRequest`` is emitted as ``http.request`` for the transport.
3. The transport settles the request exactly once:
   - ``resolve`` parses the body and sends the formatted message to the
     event's source, or logs why nothing was sent;
   - ``reject`` logs the transport failure.

No failure escapes to the host: every per-request error ends as a
WARNING log record and the reply queue is left untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from .bus import Emitter, MessageQueue
from .config import PluginConfig
from .errors import ApiResponseError, EmptyResultError, MalformedMetadataError
from .formatting import format_response
from .models import MetadataRequest, UrlEvent, VideoMetadata
from .request_builder import build_request
from .urls import MONITORED_HOSTS, extract_video_id

logger = logging.getLogger(__name__)

REQUEST_EVENT = "http.request"


def _error_detail(error: Any) -> Any:
    """Pull the human-readable message out of a Data API ``error`` object."""
    if isinstance(error, Mapping) and "message" in error:
        return error["message"]
    return error


class YouTubePlugin:
    """Bus plugin that turns YouTube URLs into video summaries."""

    def __init__(self, config: PluginConfig | Mapping[str, object], emitter: Emitter) -> None:
        if not isinstance(config, PluginConfig):
            config = PluginConfig.load(config)
        self._config = config
        self._emitter = emitter
        self._tz = config.tzinfo

    @property
    def config(self) -> PluginConfig:
        return self._config

    def subscribed_events(self) -> dict[str, Callable[..., None]]:
        """Bus events this plugin handles, one per monitored host."""
        return {f"url.host.{host}": self.handle_url for host in sorted(MONITORED_HOSTS)}

    def register(self, bus: Any) -> None:
        """Subscribe to every monitored host on *bus* (anything with ``on``)."""
        for event, handler in self.subscribed_events().items():
            bus.on(event, handler)

    def handle_url(self, url: str, event: UrlEvent, queue: MessageQueue) -> None:
        """Look up the video behind *url*, replying to ``event.source`` when done."""
        video_id = extract_video_id(url)
        if not video_id:
            return
        request = build_request(
            video_id,
            event,
            queue,
            self.resolve,
            self.reject,
            api_key=self._config.key,
            base_url=self._config.api_url,
        )
        logger.debug("Requesting data for video %s", video_id)
        try:
            self._emitter.emit(REQUEST_EVENT, request)
        except Exception as exc:
            request.reject(str(exc) or exc.__class__.__name__)

    def render_response(self, url: str, body: str) -> str:
        """Turn a ``videos.list`` response body into the outbound message.

        Raises:
            ApiResponseError: The body carries an ``error`` field.
            EmptyResultError: No items were returned.
            MalformedMetadataError: The body or its first item cannot be used.
        """
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, TypeError) as exc:
            raise MalformedMetadataError(f"Response is not JSON: {exc}") from exc
        if not isinstance(data, Mapping):
            raise MalformedMetadataError("Response is not a JSON object")

        if data.get("error") is not None:
            raise ApiResponseError(_error_detail(data["error"]))

        items = data.get("items")
        if not items:
            raise EmptyResultError(f"No videos found for {url}")
        if not isinstance(items, list):
            raise MalformedMetadataError("Response items is not a list")

        metadata = VideoMetadata.from_api_item(items[0])
        return format_response(
            metadata,
            self._config.response_format,
            self._config.published_format,
            self._config.duration_format,
            self._tz,
        )

    def resolve(self, request: MetadataRequest, body: str) -> None:
        """Handle a completed request: send the summary or log why not."""
        url = request.url
        try:
            message = self.render_response(url, body)
        except ApiResponseError as exc:
            logger.warning(
                "Query response contained an error: %s (%s)", exc.detail, url,
                extra={"url": url, "error": exc.detail},
            )
            return
        except EmptyResultError:
            logger.warning("Query returned no results (%s)", url, extra={"url": url})
            return
        except MalformedMetadataError as exc:
            logger.warning(
                "Query returned unusable video data: %s (%s)", exc, url,
                extra={"url": url, "error": str(exc)},
            )
            return
        except Exception as exc:
            logger.warning(
                "Unexpected failure rendering video data (%s)", url,
                exc_info=True,
                extra={"url": url, "error": str(exc)},
            )
            return
        request.queue.send_message(request.event.source, message)

    def reject(self, request: MetadataRequest, error: str) -> None:
        """Handle a failed request."""
        logger.warning(
            "Request for video data failed: %s (%s)", error, request.url,
            extra={"url": request.url, "error": error},
        )
