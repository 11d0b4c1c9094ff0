"""
Event type editor form state.

Mirrors what the host sees while editing: raw input goes in field by field,
the slug follows the title until the host edits the slug directly, and
submit() turns the state into a validated EventTypeCreate.
"""

import re
from typing import Any, Optional

from ..domain.event_types.schemas import EventTypeCreate
from ..errors import ValidationFailed
from ..shared.slugify import slugify
from ..shared.validation import validate_payload

DURATION_OPTIONS = (15, 30, 45, 60, 90, 120)

LOCATION_TYPES = {
    "zoom": "Zoom",
    "google_meet": "Google Meet",
    "phone": "Phone Call",
    "in_person": "In Person",
    "custom": "Custom",
}

PRESET_COLORS = (
    "#3B82F6",
    "#8B5CF6",
    "#EC4899",
    "#EF4444",
    "#F59E0B",
    "#10B981",
    "#06B6D4",
    "#6366F1",
    "#14B8A6",
    "#84CC16",
)

DEFAULT_VALUES = {
    "title": "",
    "event_slug": "",
    "description": "",
    "duration_minutes": 30,
    "location_type": "zoom",
    "location_value": "",
    "is_active": True,
    "color": PRESET_COLORS[0],
    "buffer_before": 0,
    "buffer_after": 0,
    "min_notice_hours": 1,
}

# Title before slug, so a submission carrying both ends with the explicit slug
FIELD_ORDER = tuple(DEFAULT_VALUES)

NUMERIC_FIELDS = ("duration_minutes", "buffer_before", "buffer_after", "min_notice_hours")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any, default: int = 0) -> int:
    """Read an integer from raw input; "45 min" -> 45, "" -> default"""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return default


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "on", "yes")
    return bool(value)


class EventTypeForm:
    """Local state of the event type editor"""

    def __init__(self, initial: Optional[dict] = None):
        initial = initial or {}
        self.values: dict[str, Any] = {}
        for field, default in DEFAULT_VALUES.items():
            value = initial.get(field)
            self.values[field] = default if value is None else value

        # Editing an existing record never rewrites its slug from the title
        self.slug_manually_edited = bool(initial.get("event_slug"))
        self.errors: dict[str, str] = {}

    @property
    def show_location_value(self) -> bool:
        return self.values["location_type"] == "custom"

    def set_title(self, title: Optional[str]) -> None:
        self.values["title"] = "" if title is None else str(title)
        if not self.slug_manually_edited and self.values["title"]:
            self.values["event_slug"] = slugify(self.values["title"])

    def set_slug(self, slug: Optional[str]) -> None:
        """A direct slug edit; from here on the title no longer drives the slug"""
        self.slug_manually_edited = True
        self.values["event_slug"] = slugify("" if slug is None else str(slug))

    def set_field(self, field: str, value: Any) -> None:
        if field == "title":
            self.set_title(value)
        elif field == "event_slug":
            self.set_slug(value)
        elif field in NUMERIC_FIELDS:
            self.values[field] = parse_int(value)
        elif field == "is_active":
            self.values[field] = parse_bool(value)
        elif field in DEFAULT_VALUES:
            self.values[field] = value
        else:
            raise ValueError(f"Unknown event type field: {field}")

    def apply(self, raw: dict) -> "EventTypeForm":
        """Replay a submitted payload through the same handlers as field edits"""
        for field in FIELD_ORDER:
            if field in raw:
                self.set_field(field, raw[field])
        return self

    def submit(self) -> EventTypeCreate:
        """
        Validate the current state.

        Raises:
            ValidationFailed: With every field error; also kept on self.errors
        """
        payload = dict(self.values)
        for optional_text in ("description", "location_value"):
            if isinstance(payload[optional_text], str) and not payload[optional_text].strip():
                payload[optional_text] = None

        extra = []
        if payload["location_type"] == "custom" and not payload["location_value"]:
            extra.append(
                {
                    "path": ["location_value"],
                    "message": "Location details are required for a custom location",
                }
            )

        try:
            data = validate_payload(EventTypeCreate, payload)
        except ValidationFailed as e:
            failure = ValidationFailed(e.details + extra)
            self.errors = failure.field_errors()
            raise failure from e

        if extra:
            failure = ValidationFailed(extra)
            self.errors = failure.field_errors()
            raise failure

        self.errors = {}
        return data
