"""Tests for human-readable formatting helpers (utils/formatting.py)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tubegrab.utils.formatting import format_bitrate, format_bytes, format_duration


class TestFormatBytes:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (512, "512 B"),
            (1024, "1.0 KB"),
            (12_288, "12.0 KB"),
            (1024 * 1024, "1.00 MB"),
            (1_572_864, "1.50 MB"),
        ],
    )
    def test_units(self, size: int, expected: str) -> None:
        assert format_bytes(size) == expected


class TestFormatDuration:
    def test_none_is_unknown(self) -> None:
        assert format_duration(None) == "unknown"

    def test_minutes_and_seconds(self) -> None:
        assert format_duration(timedelta(seconds=213)) == "3:33"

    def test_hours(self) -> None:
        assert format_duration(timedelta(hours=1, minutes=2, seconds=3)) == "1:02:03"

    def test_fraction_truncated(self) -> None:
        assert format_duration(timedelta(seconds=59.9)) == "0:59"


class TestFormatBitrate:
    def test_rounds_to_kbps(self) -> None:
        assert format_bitrate(129_500) == "130 kbps"

    def test_zero(self) -> None:
        assert format_bitrate(0) == "0 kbps"
