"""Load plugin settings from a shared ``.env`` file.

Variables in ``~/.config/youtube-link-info/.env`` fill in whatever the
process environment leaves unset, so the API key does not need to be
exported in every shell that starts the bot.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_ENV_PATH = Path.home() / ".config" / "youtube-link-info" / ".env"

_QUOTES = ('"', "'")


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def _needs_value(key: str, current: str | None) -> bool:
    """Return True when *current* is missing, blank, or a bare ``$KEY`` placeholder."""
    if current is None:
        return True
    current = _strip_quotes(current.strip()).strip()
    return not current or current in {f"${key}", f"${{{key}}}"}


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines from *path*.

    Blank lines, ``#`` comments, an ``export`` prefix and matching quotes
    around the value are handled. Values are never expanded.
    """
    values: dict[str, str] = {}
    if not path.is_file():
        return values

    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        line = line.removeprefix("export ")
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        values[key] = _strip_quotes(value.strip())
    return values


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Copy vars from *path* into ``os.environ`` where they are not already set.

    Returns:
        Dict of the vars that were injected.
    """
    injected: dict[str, str] = {}
    for key, value in parse_dotenv(path or DEFAULT_ENV_PATH).items():
        if _needs_value(key, os.environ.get(key)):
            os.environ[key] = value
            injected[key] = value
    return injected
