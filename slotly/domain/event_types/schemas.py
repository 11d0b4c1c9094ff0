"""Event type domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ValidationInfo, field_validator

from ...shared.validators import (
    validate_event_slug,
    validate_hex_color,
    validate_length,
    validate_location_type,
    validate_non_negative,
    validate_positive,
)

NON_NULLABLE_FIELDS = (
    "title",
    "event_slug",
    "duration_minutes",
    "location_type",
    "is_active",
    "buffer_before",
    "buffer_after",
    "min_notice_hours",
)


class EventTypeRules(BaseModel):
    """Field rules shared by the full and partial event type schemas"""

    class Config:
        # "45", "no" and true are type errors, not an int, a bool and 1
        strict = True

    @field_validator(*NON_NULLABLE_FIELDS, check_fields=False)
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title", check_fields=False)
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return v
        return validate_length(v, "Title", 100, min_length=1, required_message="Title is required")

    @field_validator("event_slug", check_fields=False)
    @classmethod
    def validate_slug(cls, v):
        if v is None:
            return v
        return validate_event_slug(v)

    @field_validator("description", check_fields=False)
    @classmethod
    def validate_description(cls, v):
        if v is None:
            return v
        return validate_length(v, "Description", 500)

    @field_validator("duration_minutes", check_fields=False)
    @classmethod
    def validate_duration(cls, v):
        if v is None:
            return v
        return validate_positive(v, "Duration must be a positive number")

    @field_validator("location_type", check_fields=False)
    @classmethod
    def validate_location(cls, v):
        if v is None:
            return v
        return validate_location_type(v)

    @field_validator("color", check_fields=False)
    @classmethod
    def validate_color(cls, v):
        return validate_hex_color(v)

    @field_validator("buffer_before", check_fields=False)
    @classmethod
    def validate_buffer_before(cls, v):
        if v is None:
            return v
        return validate_non_negative(v, "Buffer before must be non-negative")

    @field_validator("buffer_after", check_fields=False)
    @classmethod
    def validate_buffer_after(cls, v):
        if v is None:
            return v
        return validate_non_negative(v, "Buffer after must be non-negative")

    @field_validator("min_notice_hours", check_fields=False)
    @classmethod
    def validate_min_notice(cls, v):
        if v is None:
            return v
        return validate_positive(v, "Minimum notice must be a positive number")


class EventTypeCreate(EventTypeRules):
    """Schema for creating a new event type (every required field present)"""

    title: str
    event_slug: str
    description: Optional[str] = None
    duration_minutes: int
    location_type: str
    location_value: Optional[str] = None
    is_active: bool = True
    color: Optional[str] = None
    buffer_before: int = 0
    buffer_after: int = 0
    min_notice_hours: int = 1


class EventTypeUpdate(EventTypeRules):
    """
    Schema for partial updates.

    Every field may be omitted, but a field that is present must satisfy the
    same rules as on create. Only present fields are written.
    """

    title: Optional[str] = None
    event_slug: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    location_type: Optional[str] = None
    location_value: Optional[str] = None
    is_active: Optional[bool] = None
    color: Optional[str] = None
    buffer_before: Optional[int] = None
    buffer_after: Optional[int] = None
    min_notice_hours: Optional[int] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class EventTypeResponse(BaseModel):
    """Schema for event type response"""

    id: str
    user_id: str
    title: str
    event_slug: str
    description: Optional[str] = None
    duration_minutes: int
    location_type: str
    location_value: Optional[str] = None
    is_active: bool
    color: Optional[str] = None
    buffer_before: int
    buffer_after: int
    min_notice_hours: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
