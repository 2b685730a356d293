"""Plugin configuration via a settings mapping or environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import tzinfo

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from .errors import ConfigurationError
from .formatting import resolve_timezone

logger = logging.getLogger(__name__)

ERR_INVALID_KEY = 1
ERR_INVALID_RESPONSEFORMAT = 2
ERR_INVALID_PUBLISHEDFORMAT = 3
ERR_INVALID_DURATIONFORMAT = 4
ERR_INVALID_PUBLISHEDTIMEZONE = 5
ERR_INVALID_APIURL = 6
ERR_INVALID_REQUESTTIMEOUT = 7

DEFAULT_API_URL = "https://www.googleapis.com/youtube/v3/videos"
DEFAULT_RESPONSE_FORMAT = (
    '[ %link% ] "%title%" by %author%'
    "; Length %duration%"
    "; Published %published%"
    "; Views %views%"
    "; Likes %likes%"
)
DEFAULT_PUBLISHED_FORMAT = "%-m/%-d/%y %-I:%M %p"
DEFAULT_DURATION_FORMAT = "%im%ss"

# field name -> (plugin-style alias, env var, error code)
_SETTINGS: dict[str, tuple[str, str, int]] = {
    "key": ("key", "YOUTUBE_API_KEY", ERR_INVALID_KEY),
    "response_format": ("responseFormat", "YOUTUBE_RESPONSE_FORMAT", ERR_INVALID_RESPONSEFORMAT),
    "published_format": ("publishedFormat", "YOUTUBE_PUBLISHED_FORMAT", ERR_INVALID_PUBLISHEDFORMAT),
    "duration_format": ("durationFormat", "YOUTUBE_DURATION_FORMAT", ERR_INVALID_DURATIONFORMAT),
    "published_timezone": ("publishedTimezone", "YOUTUBE_PUBLISHED_TIMEZONE", ERR_INVALID_PUBLISHEDTIMEZONE),
    "api_url": ("apiUrl", "YOUTUBE_API_URL", ERR_INVALID_APIURL),
    "request_timeout": ("requestTimeout", "YOUTUBE_REQUEST_TIMEOUT", ERR_INVALID_REQUESTTIMEOUT),
}

_ERROR_CODES: dict[str, int] = {
    name: code
    for field, (alias, _, code) in _SETTINGS.items()
    for name in (field, alias)
}


class PluginConfig(BaseModel):
    """Immutable settings shared by every request the plugin makes.

    Accepts both snake_case names and the plugin-style camelCase keys
    (``responseFormat``, ``publishedFormat``, ...). String settings are
    strict: a non-string value is rejected rather than coerced.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    key: StrictStr = Field(min_length=1)
    response_format: StrictStr = Field(default=DEFAULT_RESPONSE_FORMAT, alias="responseFormat")
    published_format: StrictStr = Field(default=DEFAULT_PUBLISHED_FORMAT, alias="publishedFormat")
    duration_format: StrictStr = Field(default=DEFAULT_DURATION_FORMAT, alias="durationFormat")
    published_timezone: StrictStr = Field(default="UTC", alias="publishedTimezone")
    api_url: StrictStr = Field(default=DEFAULT_API_URL, alias="apiUrl")
    request_timeout: float = Field(default=10.0, alias="requestTimeout", gt=0)

    @field_validator("published_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        if not value.startswith(("https://", "http://")):
            raise ValueError(f"apiUrl must be an http(s) URL, got '{value}'")
        return value

    @property
    def tzinfo(self) -> tzinfo:
        """Zone that publish timestamps are rendered in."""
        return resolve_timezone(self.published_timezone)

    @classmethod
    def load(cls, settings: Mapping[str, object]) -> PluginConfig:
        """Validate a settings mapping.

        Raises:
            ConfigurationError: With the ``ERR_*`` code of the first invalid setting.
        """
        try:
            return cls.model_validate(dict(settings))
        except ValidationError as exc:
            first = exc.errors()[0]
            name = str(first["loc"][0]) if first["loc"] else "key"
            code = _ERROR_CODES.get(name, ERR_INVALID_KEY)
            raise ConfigurationError(f"Invalid setting '{name}': {first['msg']}", code) from exc

    @classmethod
    def from_env(cls) -> PluginConfig:
        """Build config from ``YOUTUBE_*`` environment variables."""
        values = {
            name: os.environ[env_var]
            for name, (_, env_var, _) in _SETTINGS.items()
            if os.environ.get(env_var, "").strip()
        }
        if "request_timeout" in values:
            try:
                values["request_timeout"] = float(values["request_timeout"])
            except ValueError as exc:
                raise ConfigurationError(
                    f"YOUTUBE_REQUEST_TIMEOUT must be a number, got '{values['request_timeout']}'",
                    ERR_INVALID_REQUESTTIMEOUT,
                ) from exc
        return cls.load(values)


_config: PluginConfig | None = None


def get_config() -> PluginConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/youtube-link-info/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logger.info(
                "Loaded %d var(s) from config: %s",
                len(injected),
                ", ".join(injected.keys()),
            )
        _config = PluginConfig.from_env()
    return _config
