"""Tests for canonical rotation timestamps."""

from datetime import datetime

from logrotate.timestamps import TIMESTAMP_DIGITS, get_timestamp


class TestGetTimestamp:
    def test_format_with_milliseconds(self):
        ts = get_timestamp(lambda: datetime(2024, 1, 2, 15, 4, 5, 123456))
        assert ts == "20240102150405123"

    def test_fixed_width_when_millis_small(self):
        ts = get_timestamp(lambda: datetime(2024, 11, 30, 0, 0, 0, 7000))
        assert ts == "20241130000000007"
        assert len(ts) == TIMESTAMP_DIGITS

    def test_default_clock_is_digits(self):
        ts = get_timestamp()
        assert len(ts) == TIMESTAMP_DIGITS
        assert ts.isdigit()

    def test_lexicographic_matches_chronological(self):
        earlier = get_timestamp(lambda: datetime(2024, 9, 30, 23, 59, 59, 999000))
        later = get_timestamp(lambda: datetime(2024, 10, 1, 0, 0, 0, 0))
        assert earlier < later
