"""Data models — inbound URL events, metadata requests, parsed video metadata.

``VideoMetadata`` is populated from one item of a YouTube Data API v3
``videos.list`` response (parts ``id,snippet,contentDetails,statistics``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .bus import MessageQueue
from .errors import MalformedMetadataError
from .formatting import parse_iso8601_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrlEvent:
    """A URL observed in the message stream.

    ``source`` is where replies go (a channel or a user); ``context``
    carries whatever the host attached to the original message.
    """

    url: str
    source: str
    context: Any = None


@dataclass
class MetadataRequest:
    """One pending metadata lookup with its bound continuations.

    The request settles at most once: the first ``resolve`` or ``reject``
    wins and later calls are logged and ignored.
    """

    url: str
    video_id: str
    event: UrlEvent
    queue: MessageQueue
    on_resolved: Callable[[MetadataRequest, str], None] = field(repr=False)
    on_rejected: Callable[[MetadataRequest, str], None] = field(repr=False)
    settled: bool = False

    def resolve(self, body: str) -> None:
        """Deliver the raw response body."""
        if self._settle("resolve"):
            self.on_resolved(self, body)

    def reject(self, error: str) -> None:
        """Deliver a transport failure."""
        if self._settle("reject"):
            self.on_rejected(self, error)

    def _settle(self, outcome: str) -> bool:
        if self.settled:
            logger.warning("Ignoring %s of already settled request %s", outcome, self.url)
            return False
        self.settled = True
        return True


class VideoMetadata(BaseModel):
    """Validated video record used to render a response.

    Counts arrive from the API as decimal strings and are coerced to int.
    Likes, dislikes, favorites and comments may be hidden by the uploader
    and are optional; everything else is required.
    """

    model_config = ConfigDict(frozen=True)

    video_id: str = Field(min_length=1)
    title: str
    author: str
    published_at: datetime
    duration_seconds: int = Field(ge=0)
    view_count: int = Field(ge=0)
    like_count: int | None = None
    dislike_count: int | None = None
    favorite_count: int | None = None
    comment_count: int | None = None

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_iso8601_duration(value)
        return value

    @field_validator("published_at", mode="before")
    @classmethod
    def require_timestamp(cls, value: Any) -> Any:
        if not isinstance(value, (str, datetime)):
            raise ValueError(f"expected an ISO 8601 timestamp, got {type(value).__name__}")
        return value

    @field_validator(
        "view_count", "like_count", "dislike_count", "favorite_count", "comment_count",
        mode="before",
    )
    @classmethod
    def require_count(cls, value: Any) -> Any:
        if value is None:
            return value
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError(f"expected a decimal count, got {type(value).__name__}")
        return value

    @field_validator("published_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_api_item(cls, item: Mapping[str, Any]) -> VideoMetadata:
        """Build from one ``items[]`` entry of a ``videos.list`` response.

        Raises:
            MalformedMetadataError: If a required field is missing or invalid.
        """
        try:
            snippet = item["snippet"]
            details = item["contentDetails"]
            stats = item["statistics"]
            return cls(
                video_id=item["id"],
                title=snippet["title"],
                author=snippet["channelTitle"],
                published_at=snippet["publishedAt"],
                duration_seconds=details["duration"],
                view_count=stats["viewCount"],
                like_count=stats.get("likeCount"),
                dislike_count=stats.get("dislikeCount"),
                favorite_count=stats.get("favoriteCount"),
                comment_count=stats.get("commentCount"),
            )
        except KeyError as exc:
            raise MalformedMetadataError(f"Missing field {exc}") from exc
        except (TypeError, AttributeError) as exc:
            raise MalformedMetadataError(f"Unexpected item shape: {exc}") from exc
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise MalformedMetadataError(f"Invalid {location}: {first['msg']}") from exc
