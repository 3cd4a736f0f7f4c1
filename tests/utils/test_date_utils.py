"""Tests for date utility functions."""

from datetime import date, datetime, timezone, timedelta
from consultant_hub.utils.date_utils import (
    parse_iso_datetime,
    format_date_display
)


class TestParseIsoDatetime:
    """Tests for parse_iso_datetime() function."""

    def test_handles_normal_iso_string_with_z(self):
        """Test parsing ISO string with Z timezone."""
        result = parse_iso_datetime("2024-05-01T10:00:00Z")
        assert result is not None
        assert result.year == 2024
        assert result.month == 5
        assert result.day == 1
        assert result.hour == 10
        assert result.tzinfo == timezone.utc

    def test_handles_naive_datetime(self):
        """Test parsing ISO string without timezone."""
        result = parse_iso_datetime("2024-05-01T10:00:00")
        assert result is not None
        assert result.hour == 10
        assert result.tzinfo == timezone.utc  # Should default to UTC

    def test_handles_date_only(self):
        result = parse_iso_datetime("2024-05-01")
        assert result == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_handles_invalid_strings(self):
        """Test that invalid strings return None."""
        assert parse_iso_datetime("invalid") is None
        assert parse_iso_datetime("2024-13-45") is None
        assert parse_iso_datetime("") is None
        assert parse_iso_datetime(None) is None

    def test_converts_offsets_to_utc(self):
        result = parse_iso_datetime("2024-05-01T10:00:00+05:00")
        assert result.hour == 5
        assert result.utcoffset() == timedelta(0)


class TestFormatDateDisplay:
    """Tests for format_date_display() function."""

    def test_formats_datetime(self):
        assert format_date_display(datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)) == "2025-01-10"

    def test_formats_date(self):
        assert format_date_display(date(2025, 1, 10)) == "2025-01-10"

    def test_missing_value_uses_default(self):
        assert format_date_display(None) == "Unknown date"
        assert format_date_display(None, default="n/a") == "n/a"
        assert format_date_display("not a date") == "Unknown date"

    def test_formats_iso_string(self):
        assert format_date_display("2025-01-10T09:00:00Z") == "2025-01-10"
        assert format_date_display("2025-01-10") == "2025-01-10"
