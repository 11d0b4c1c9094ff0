"""Unit tests for the visitor timezone picker"""

from datetime import datetime, timezone

import pytest

from slotly.forms import timezone_selector
from slotly.forms.timezone_selector import (
    FALLBACK_TIMEZONES,
    TimezoneSelector,
    format_timezone,
    list_timezones,
)


class TestListTimezones:
    def test_lists_iana_zones_sorted(self):
        zones = list_timezones()
        assert "America/New_York" in zones
        assert zones == sorted(zones)

    def test_falls_back_when_database_unavailable(self, monkeypatch):
        def broken():
            raise OSError("no tzdata")

        monkeypatch.setattr(timezone_selector, "available_timezones", broken)
        assert list_timezones() == FALLBACK_TIMEZONES

    def test_falls_back_when_database_empty(self, monkeypatch):
        monkeypatch.setattr(timezone_selector, "available_timezones", lambda: set())
        assert list_timezones() == FALLBACK_TIMEZONES


class TestFormatTimezone:
    def test_label_with_abbreviation(self):
        winter = datetime(2025, 1, 15, 12, tzinfo=timezone.utc)
        assert format_timezone("America/New_York", winter) == "America/New York (EST)"

    def test_only_first_underscore_replaced(self):
        winter = datetime(2025, 1, 15, 12, tzinfo=timezone.utc)
        label = format_timezone("America/Port_of_Spain", winter)
        assert label.startswith("America/Port of_Spain (")

    def test_unknown_zone_falls_back_to_name(self):
        assert format_timezone("Not/A_Zone") == "Not/A Zone"


class TestTimezoneSelector:
    def test_notifies_on_construction(self):
        seen = []
        TimezoneSelector(on_change=seen.append)
        assert seen == ["UTC"]

    def test_notifies_on_selection(self):
        seen = []
        selector = TimezoneSelector(on_change=seen.append, default_value="Europe/London")
        selector.select("Asia/Tokyo")

        assert seen == ["Europe/London", "Asia/Tokyo"]
        assert selector.selected == "Asia/Tokyo"

    def test_unknown_default_falls_back_to_utc(self):
        assert TimezoneSelector(default_value="Mars/Olympus_Mons").selected == "UTC"

    def test_select_rejects_unknown_zone(self):
        selector = TimezoneSelector()
        with pytest.raises(ValueError):
            selector.select("Mars/Olympus_Mons")
        assert selector.selected == "UTC"

    def test_options_shape(self):
        options = TimezoneSelector().options()
        values = [option["value"] for option in options]

        assert "UTC" in values
        assert all(set(option) == {"value", "label"} for option in options)
