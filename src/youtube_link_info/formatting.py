"""Render video metadata into a message using a placeholder template.

Field transforms:
- ``%published%`` — strftime pattern; ``%-X`` strips leading zeros on any platform.
- ``%duration%`` — interval pattern with ``%d %h %i %s`` tokens (upper case
  zero-pads to two digits, ``%a`` is total seconds, ``%%`` a literal ``%``).
- counts — integers with thousands separators.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime, timezone, tzinfo
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

if TYPE_CHECKING:
    from .models import VideoMetadata

SHORT_LINK_BASE = "https://youtu.be/"

_ISO8601_DURATION = re.compile(
    r"^P(?:(?P<weeks>\d+)W)?(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)
_UNPADDED_DIRECTIVE = re.compile(r"%(%|-[a-zA-Z])")
_DURATION_TOKEN = re.compile(r"%([dDhHiIsSa%])")

# unit token -> seconds per unit, largest first
_DURATION_UNITS: tuple[tuple[str, int], ...] = (
    ("d", 86400),
    ("h", 3600),
    ("i", 60),
    ("s", 1),
)


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA zone name (``UTC`` needs no tz database)."""
    if name.strip().upper() in {"UTC", "Z"}:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone '{name}'") from exc


def parse_iso8601_duration(duration: str) -> int:
    """Parse an ISO 8601 interval (``PT3M30S``, ``P1DT2H``) into total seconds.

    Raises:
        ValueError: If *duration* is not an interval with at least one component.
    """
    match = _ISO8601_DURATION.match(duration.strip())
    if not match or duration.strip().endswith("T"):
        raise ValueError(f"Invalid ISO 8601 duration: '{duration}'")
    parts = match.groupdict()
    if all(value is None for value in parts.values()):
        raise ValueError(f"Invalid ISO 8601 duration: '{duration}'")
    weeks, days, hours, minutes, seconds = (
        int(parts[name] or 0) for name in ("weeks", "days", "hours", "minutes", "seconds")
    )
    return (((weeks * 7 + days) * 24 + hours) * 60 + minutes) * 60 + seconds


def format_duration(total_seconds: int, pattern: str) -> str:
    """Render *total_seconds* with a duration pattern (``%im%ss`` -> ``3m30s``).

    A unit the pattern leaves out is carried into the next smaller unit
    it mentions, so ``%i:%S`` shows a 1h2m3s video as ``62:03``.
    """
    used = {token.lower() for token in _DURATION_TOKEN.findall(pattern)}
    values: dict[str, int] = {}
    remaining = total_seconds
    for unit, size in _DURATION_UNITS:
        if unit in used or unit == "s":
            values[unit], remaining = divmod(remaining, size)

    def _render(match: re.Match[str]) -> str:
        token = match.group(1)
        if token == "%":
            return "%"
        if token == "a":
            return str(total_seconds)
        value = values.get(token.lower(), 0)
        return f"{value:02d}" if token.isupper() else str(value)

    return _DURATION_TOKEN.sub(_render, pattern)


def format_published(published_at: datetime, pattern: str, tz: tzinfo | None = None) -> str:
    """Render a publish timestamp with a strftime *pattern* in zone *tz*."""
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    if tz is not None:
        published_at = published_at.astimezone(tz)

    def _render(match: re.Match[str]) -> str:
        directive = match.group(1)
        if directive == "%":
            return "%%"
        rendered = published_at.strftime("%" + directive[1])
        return rendered.lstrip("0") or "0"

    return published_at.strftime(_UNPADDED_DIRECTIVE.sub(_render, pattern))


def short_link(video_id: str) -> str:
    """Canonical short link for a video, e.g. ``https://youtu.be/<id>``."""
    return SHORT_LINK_BASE + video_id


def format_count(value: int | None) -> str:
    """Render a count with grouping separators and no decimals (None -> ``0``)."""
    return f"{value or 0:,d}"


def build_replacements(
    metadata: VideoMetadata,
    published_format: str,
    duration_format: str,
    tz: tzinfo | None = None,
) -> dict[str, str]:
    """Map every supported placeholder to its rendered value for *metadata*."""
    return {
        "%link%": short_link(metadata.video_id),
        "%title%": metadata.title,
        "%author%": metadata.author,
        "%published%": format_published(metadata.published_at, published_format, tz),
        "%views%": format_count(metadata.view_count),
        "%likes%": format_count(metadata.like_count),
        "%dislikes%": format_count(metadata.dislike_count),
        "%favorites%": format_count(metadata.favorite_count),
        "%comments%": format_count(metadata.comment_count),
        "%duration%": format_duration(metadata.duration_seconds, duration_format),
    }


def substitute(template: str, replacements: Mapping[str, str]) -> str:
    """Replace each literal placeholder in one pass.

    Rendered values are never rescanned, so a title containing ``%author%``
    stays as written. Unknown placeholders pass through unchanged.
    """
    if not replacements:
        return template
    keys = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda match: replacements[match.group(0)], template)


def format_response(
    metadata: VideoMetadata,
    template: str,
    published_format: str,
    duration_format: str,
    tz: tzinfo | None = None,
) -> str:
    """Render *template* for one video."""
    replacements = build_replacements(metadata, published_format, duration_format, tz)
    return substitute(template, replacements)
