"""Tests for response formatting — durations, dates, counts, templates."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from youtube_link_info.config import DEFAULT_DURATION_FORMAT, DEFAULT_PUBLISHED_FORMAT
from youtube_link_info.formatting import (
    build_replacements,
    format_count,
    format_duration,
    format_published,
    format_response,
    parse_iso8601_duration,
    resolve_timezone,
    short_link,
    substitute,
)
from youtube_link_info.models import VideoMetadata

from tests.conftest import video_item

PUBLISHED = datetime(2010, 2, 7, 8, 9, 51, tzinfo=timezone.utc)


@pytest.fixture()
def metadata() -> VideoMetadata:
    return VideoMetadata.from_api_item(video_item())


# ── Durations ───────────────────────────────────────────────────────────────


class TestParseIso8601Duration:
    """ISO 8601 interval string → seconds."""

    @pytest.mark.parametrize("value, expected", [
        ("PT3M30S", 210),
        ("PT1H2M3S", 3723),
        ("PT2H", 7200),
        ("PT45S", 45),
        ("PT10M", 600),
        ("P1DT1S", 86401),
        ("P1W", 604800),
        ("P0D", 0),
    ])
    def test_valid(self, value, expected):
        assert parse_iso8601_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "P", "PT", "P1DT", "3M30S", "PT3.5S", "not-a-duration"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_iso8601_duration(value)


class TestFormatDuration:
    def test_default_pattern(self):
        assert format_duration(210, DEFAULT_DURATION_FORMAT) == "3m30s"

    def test_zero_padded_tokens(self):
        assert format_duration(210, "%IM%SS") == "03M30S"

    def test_hours_fold_into_minutes_when_not_shown(self):
        assert format_duration(3723, "%im%ss") == "62m3s"

    def test_hours_shown(self):
        assert format_duration(3723, "%h:%I:%S") == "1:02:03"

    def test_days_fold_into_hours(self):
        assert format_duration(90000, "%hh%Im") == "25h00m"

    def test_total_seconds_and_literal_percent(self):
        assert format_duration(210, "%a seconds, 100%%") == "210 seconds, 100%"

    def test_unknown_tokens_pass_through(self):
        assert format_duration(210, "%x %i") == "%x 3"


# ── Dates ───────────────────────────────────────────────────────────────────


class TestFormatPublished:
    def test_default_pattern(self):
        assert format_published(PUBLISHED, DEFAULT_PUBLISHED_FORMAT) == "2/7/10 8:09 AM"

    def test_custom_pattern(self):
        assert format_published(PUBLISHED, "%Y-%m-%d %H:%M:%S") == "2010-02-07 08:09:51"

    def test_unpadded_zero_stays_visible(self):
        midnight = datetime(2000, 1, 1, 0, 0, tzinfo=timezone.utc)
        assert format_published(midnight, "%-H:%-M %-y") == "0:0 0"

    def test_literal_percent(self):
        assert format_published(PUBLISHED, "100%% %-d") == "100% 7"

    def test_converts_to_zone(self):
        minus_six = timezone(timedelta(hours=-6))
        assert format_published(PUBLISHED, DEFAULT_PUBLISHED_FORMAT, minus_six) == "2/7/10 2:09 AM"

    def test_naive_timestamp_is_utc(self):
        naive = PUBLISHED.replace(tzinfo=None)
        assert format_published(naive, "%H:%M", timezone.utc) == "08:09"


class TestResolveTimezone:
    def test_utc(self):
        assert resolve_timezone("UTC") is timezone.utc

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown time zone"):
            resolve_timezone("Mars/Olympus_Mons")


class TestFormatCount:
    @pytest.mark.parametrize("value, expected", [
        (6283, "6,283"),
        (35, "35"),
        (0, "0"),
        (1_500_000_000, "1,500,000,000"),
        (None, "0"),
    ])
    def test_grouping(self, value, expected):
        assert format_count(value) == expected


class TestShortLink:
    def test_short_link(self):
        assert short_link("HFuTvTVAO-M") == "https://youtu.be/HFuTvTVAO-M"


# ── Templates ───────────────────────────────────────────────────────────────


class TestBuildReplacements:
    def test_all_tokens(self, metadata):
        replacements = build_replacements(
            metadata, DEFAULT_PUBLISHED_FORMAT, DEFAULT_DURATION_FORMAT, timezone.utc,
        )
        assert replacements == {
            "%link%": "https://youtu.be/HFuTvTVAO-M",
            "%title%": "Nick Motil - Butterflies (2010)",
            "%author%": "Nick Motil",
            "%published%": "2/7/10 8:09 AM",
            "%views%": "6,283",
            "%likes%": "35",
            "%dislikes%": "0",
            "%favorites%": "0",
            "%comments%": "27",
            "%duration%": "3m30s",
        }


class TestSubstitute:
    def test_only_recognised_token_changes(self):
        assert substitute("a %title% b %nope% c", {"%title%": "T"}) == "a T b %nope% c"

    def test_values_are_not_rescanned(self):
        result = substitute("%title% / %author%", {"%title%": "%author%", "%author%": "Bob"})
        assert result == "%author% / Bob"

    def test_repeated_token(self):
        assert substitute("%views% %views%", {"%views%": "1"}) == "1 1"

    def test_no_replacements(self):
        assert substitute("%title%", {}) == "%title%"


class TestFormatResponse:
    def test_single_token_template(self, metadata):
        result = format_response(metadata, "Now: %duration%!", "%Y", "%im%ss")
        assert result == "Now: 3m30s!"

    def test_deterministic(self, metadata):
        template = '[ %link% ] "%title%" by %author% %published% %views%'
        first = format_response(metadata, template, DEFAULT_PUBLISHED_FORMAT, DEFAULT_DURATION_FORMAT)
        second = format_response(metadata, template, DEFAULT_PUBLISHED_FORMAT, DEFAULT_DURATION_FORMAT)
        assert first == second
        assert first == '[ https://youtu.be/HFuTvTVAO-M ] "Nick Motil - Butterflies (2010)" by Nick Motil 2/7/10 8:09 AM 6,283'
