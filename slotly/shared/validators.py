"""Shared validation utilities"""

import re
from typing import Optional

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")
SLUG_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
TIME_24H_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

LOCATION_TYPES = ("zoom", "google_meet", "phone", "in_person", "custom")

# First path segments owned by the app; a username here would be shadowed
RESERVED_USERNAMES = frozenset({"api", "auth", "dashboard", "health", "csrf-token"})


def validate_length(
    value: str,
    label: str,
    max_length: int,
    min_length: int = 0,
    required_message: Optional[str] = None,
) -> str:
    """
    Check a string against inclusive length bounds.

    Raises:
        ValueError: With a message naming the field
    """
    if len(value) < min_length:
        if min_length == 1 and required_message:
            raise ValueError(required_message)
        raise ValueError(f"{label} must be at least {min_length} characters")
    if len(value) > max_length:
        raise ValueError(f"{label} must be at most {max_length} characters")
    return value


def validate_username(username: str) -> str:
    """
    Validate a public username (3-30 chars, letters, digits and hyphens).

    Raises:
        ValueError: If the username is invalid
    """
    validate_length(username, "Username", 30, min_length=3)
    if not USERNAME_PATTERN.match(username):
        raise ValueError("Username can only contain alphanumeric characters and hyphens")
    if username.lower() in RESERVED_USERNAMES:
        raise ValueError("This username is reserved")
    return username


def validate_event_slug(slug: str) -> str:
    """
    Validate an event URL slug.

    Raises:
        ValueError: If the slug is invalid
    """
    validate_length(slug, "Event slug", 100, min_length=1, required_message="Event slug is required")
    if not SLUG_PATTERN.match(slug):
        raise ValueError("Event slug can only contain alphanumeric characters and hyphens")
    return slug


def validate_hex_color(color: Optional[str]) -> Optional[str]:
    """Validate a #RRGGBB display color"""
    if color is None:
        return color
    if not HEX_COLOR_PATTERN.match(color):
        raise ValueError("Color must be a hex value like #3B82F6")
    return color


def validate_location_type(location_type: str) -> str:
    if location_type not in LOCATION_TYPES:
        allowed = ", ".join(LOCATION_TYPES)
        raise ValueError(f"Location type must be one of: {allowed}")
    return location_type


def validate_positive(value: int, message: str) -> int:
    if value <= 0:
        raise ValueError(message)
    return value


def validate_non_negative(value: int, message: str) -> int:
    if value < 0:
        raise ValueError(message)
    return value


def validate_time_24h(value: str, label: str) -> str:
    """Validate an HH:MM 24-hour time string"""
    if not TIME_24H_PATTERN.match(value):
        raise ValueError(f"{label} must be in HH:MM format")
    return value
