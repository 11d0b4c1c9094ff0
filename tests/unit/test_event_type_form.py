"""Unit tests for the event type editor state"""

import pytest

from slotly.errors import ValidationFailed
from slotly.forms.event_type_form import (
    DURATION_OPTIONS,
    LOCATION_TYPES,
    PRESET_COLORS,
    EventTypeForm,
    parse_int,
)


class TestDefaults:
    def test_blank_form_defaults(self):
        form = EventTypeForm()

        assert form.values["duration_minutes"] == 30
        assert form.values["location_type"] == "zoom"
        assert form.values["color"] == "#3B82F6"
        assert form.values["is_active"] is True
        assert form.values["buffer_before"] == 0
        assert form.values["buffer_after"] == 0
        assert form.values["min_notice_hours"] == 1
        assert form.slug_manually_edited is False

    def test_constants(self):
        assert DURATION_OPTIONS == (15, 30, 45, 60, 90, 120)
        assert list(LOCATION_TYPES) == ["zoom", "google_meet", "phone", "in_person", "custom"]
        assert PRESET_COLORS[0] == "#3B82F6"
        assert len(PRESET_COLORS) == 10


class TestSlugLatch:
    def test_title_drives_slug_until_manual_edit(self):
        form = EventTypeForm()

        form.set_title("30 Minute Meeting")
        assert form.values["event_slug"] == "30-minute-meeting"

        form.set_slug("custom-link")
        form.set_title("Something Else")

        assert form.values["event_slug"] == "custom-link"
        assert form.values["title"] == "Something Else"

    def test_manual_slug_is_slugified(self):
        form = EventTypeForm()
        form.set_slug("My Custom Link!")
        assert form.values["event_slug"] == "my-custom-link"

    def test_latch_is_one_way(self):
        form = EventTypeForm()
        form.set_slug("first")
        form.set_slug("")
        form.set_title("New Title")
        assert form.values["event_slug"] == ""

    def test_initial_data_with_slug_starts_latched(self):
        form = EventTypeForm({"title": "Old", "event_slug": "old-slug"})
        form.set_title("New Title")
        assert form.values["event_slug"] == "old-slug"

    def test_initial_data_without_slug_follows_title(self):
        form = EventTypeForm({"title": "Old"})
        form.set_title("New Title")
        assert form.values["event_slug"] == "new-title"


class TestFieldCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [("45", 45), ("45 min", 45), ("", 0), ("abc", 0), (None, 0), (60, 60), (12.9, 12)],
    )
    def test_parse_int(self, raw, expected):
        assert parse_int(raw) == expected

    def test_numeric_fields_are_parsed(self):
        form = EventTypeForm()
        form.set_field("duration_minutes", "90")
        form.set_field("buffer_before", "")
        assert form.values["duration_minutes"] == 90
        assert form.values["buffer_before"] == 0

    def test_is_active_from_string(self):
        form = EventTypeForm()
        form.set_field("is_active", "false")
        assert form.values["is_active"] is False

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            EventTypeForm().set_field("max_bookings_per_day", 3)

    def test_custom_location_shows_value_field(self):
        form = EventTypeForm()
        assert form.show_location_value is False
        form.set_field("location_type", "custom")
        assert form.show_location_value is True


class TestSubmit:
    def test_submit_from_title_only(self):
        form = EventTypeForm().apply({"title": "30 Minute Meeting"})
        data = form.submit()

        assert data.event_slug == "30-minute-meeting"
        assert data.duration_minutes == 30
        assert data.description is None
        assert form.errors == {}

    def test_explicit_slug_in_payload_wins(self):
        data = EventTypeForm().apply({"title": "Any Title", "event_slug": "custom-link"}).submit()
        assert data.event_slug == "custom-link"

    def test_blank_optional_text_becomes_none(self):
        data = (
            EventTypeForm()
            .apply({"title": "Call", "description": "   ", "location_value": ""})
            .submit()
        )
        assert data.description is None
        assert data.location_value is None

    def test_invalid_values_collect_field_errors(self):
        form = EventTypeForm().apply(
            {"title": "Call", "duration_minutes": "0", "buffer_after": "-3"}
        )

        with pytest.raises(ValidationFailed):
            form.submit()

        assert form.errors["duration_minutes"] == "Duration must be a positive number"
        assert form.errors["buffer_after"] == "Buffer after must be non-negative"

    def test_custom_location_requires_details(self):
        form = EventTypeForm().apply({"title": "Call", "location_type": "custom"})

        with pytest.raises(ValidationFailed) as exc_info:
            form.submit()

        assert exc_info.value.field_errors() == {
            "location_value": "Location details are required for a custom location"
        }

    def test_custom_location_error_reported_with_other_errors(self):
        form = EventTypeForm().apply({"title": "", "location_type": "custom"})

        with pytest.raises(ValidationFailed):
            form.submit()

        assert "title" in form.errors
        assert "location_value" in form.errors

    def test_errors_clear_after_successful_submit(self):
        form = EventTypeForm().apply({"title": ""})
        with pytest.raises(ValidationFailed):
            form.submit()

        form.set_title("Fixed")
        form.submit()
        assert form.errors == {}
