"""
Tests for Helper Utilities
"""

from datetime import datetime, timedelta
import sys
import os

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.helpers import (
    parse_timestamp, format_timestamp, format_date, format_relative_time,
    truncate_text, display_author, is_valid_url
)

NOW = datetime(2025, 3, 10, 12, 0, 0)


class TestParseTimestamp:

    @pytest.mark.parametrize("raw, expected", [
        ("2025-03-05T14:30", datetime(2025, 3, 5, 14, 30)),
        ("2025-03-05T14:30:15", datetime(2025, 3, 5, 14, 30, 15)),
        ("2025-03-05T14:30:15.250", datetime(2025, 3, 5, 14, 30, 15, 250000)),
        ("2025-03-05T14:30:15Z", datetime(2025, 3, 5, 14, 30, 15)),
    ])
    def test_backend_formats(self, raw, expected):
        assert parse_timestamp(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "tomorrow", 42])
    def test_unparseable_is_none(self, raw):
        assert parse_timestamp(raw) is None


class TestFormatting:

    def test_format_timestamp_minutes(self):
        assert format_timestamp(datetime(2025, 3, 5, 14, 30)) == "2025-03-05T14:30"

    def test_format_timestamp_seconds(self):
        assert format_timestamp(datetime(2025, 3, 5, 14, 30, 5)) == "2025-03-05T14:30:05"

    def test_format_date(self):
        assert format_date(datetime(2025, 3, 5, 14, 30)) == "Mar 5, 2025, 02:30 PM"

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3), "3h ago"),
        (timedelta(days=2), "2d ago"),
    ])
    def test_relative_time(self, delta, expected):
        assert format_relative_time(NOW - delta, now=NOW) == expected

    def test_relative_time_after_a_week_is_full_date(self):
        assert format_relative_time(datetime(2025, 2, 1, 9, 5), now=NOW) == "Feb 1, 2025, 09:05 AM"


class TestText:

    def test_truncate_appends_ellipsis(self):
        assert truncate_text("abcdefghij", 4) == "abcd..."

    def test_truncate_short_text_unchanged(self):
        assert truncate_text("abc", 4) == "abc"

    def test_display_author_device(self):
        assert display_author("device_1700000000000_abc123xyz") == "User 3xyz"

    def test_display_author_uses_configured_prefix(self):
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr("config.settings.DEVICE_ID_PREFIX", "kiosk_")
            assert display_author("kiosk_1700000000000_abc123xyz") == "User 3xyz"
            assert display_author("device_1700000000000_abc123xyz") == "device_1700000000000_abc123xyz"

    def test_display_author_other(self):
        assert display_author("admin") == "admin"
        assert display_author("") == "Anonymous"

    def test_is_valid_url(self):
        assert is_valid_url("http://localhost:8080/api")
        assert not is_valid_url("localhost")
