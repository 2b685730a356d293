"""Summarise YouTube links seen in a message stream via the YouTube Data API."""

from .config import PluginConfig
from .models import MetadataRequest, UrlEvent, VideoMetadata
from .plugin import YouTubePlugin
from .urls import extract_video_id

__all__ = [
    "MetadataRequest",
    "PluginConfig",
    "UrlEvent",
    "VideoMetadata",
    "YouTubePlugin",
    "extract_video_id",
]
