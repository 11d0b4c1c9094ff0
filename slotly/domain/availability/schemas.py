"""
Availability rule schema.

Weekly working-hours rules for a host. Nothing persists or consumes these
yet; slot computation will build on them.
"""

from pydantic import BaseModel, ValidationInfo, field_validator

from ...shared.validators import validate_time_24h


class AvailabilityRule(BaseModel):
    day_of_week: int  # 0 = Sunday
    start_time: str  # HH:MM, 24-hour
    end_time: str

    @field_validator("day_of_week")
    @classmethod
    def validate_day_of_week(cls, v: int) -> int:
        if v < 0 or v > 6:
            raise ValueError("Day of week must be between 0 and 6")
        return v

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        return validate_time_24h(v, "Start time")

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: str, info: ValidationInfo) -> str:
        validate_time_24h(v, "End time")
        start_time = info.data.get("start_time")
        # Zero-padded HH:MM strings compare in clock order
        if start_time and v <= start_time:
            raise ValueError("End time must be after start time")
        return v
