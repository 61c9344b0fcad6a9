"""Tests for timecode parsing and formatting."""

from __future__ import annotations

import pytest

from lyricsync.lyrics.timestamps import format_clock, format_vtt_time, parse_timestamp


class TestParseTimestamp:
    def test_hours_minutes_seconds(self):
        assert parse_timestamp("00:01:23.456") == pytest.approx(83.456)

    def test_whole_hours(self):
        assert parse_timestamp("01:02:03.000") == 3723.0

    def test_minutes_seconds(self):
        assert parse_timestamp("02:05.500") == pytest.approx(125.5)

    def test_comma_decimal(self):
        assert parse_timestamp("00:00:01,250") == pytest.approx(1.25)

    def test_bare_seconds(self):
        assert parse_timestamp("7.5") == 7.5

    def test_surrounding_whitespace(self):
        assert parse_timestamp("  00:00:02.000 ") == 2.0

    @pytest.mark.parametrize("bad", [
        "", None, "abc", "00:xx:01.000", "1:2:3:4", "-5", "nan", "inf", "::",
        "01:-5.0", "00:-01:30.000", "-00:01.000",
    ])
    def test_unparseable_is_zero(self, bad):
        assert parse_timestamp(bad) == 0.0


class TestFormatting:
    def test_vtt_time(self):
        assert format_vtt_time(83.456) == "00:01:23.456"

    def test_vtt_time_hours(self):
        assert format_vtt_time(3723.0) == "01:02:03.000"

    def test_vtt_time_roundtrip(self):
        assert parse_timestamp(format_vtt_time(61.25)) == pytest.approx(61.25)

    def test_vtt_time_negative_clamped(self):
        assert format_vtt_time(-3) == "00:00:00.000"

    def test_clock(self):
        assert format_clock(0) == "00:00"
        assert format_clock(65.9) == "01:05"
        assert format_clock(600) == "10:00"
