"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_length, validate_username


class ProfileUpdate(BaseModel):
    """Schema for the profile settings form (full replace of editable fields)"""

    username: str
    full_name: Optional[str] = None
    timezone: str
    locale: str

    @field_validator("username")
    @classmethod
    def validate_username_field(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_length(v, "Full name", 100)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        return validate_length(v, "Timezone", 64, min_length=1, required_message="Timezone is required")

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        return validate_length(v, "Locale", 16, min_length=1, required_message="Locale is required")


class ProfileResponse(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    timezone: str
    locale: str
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicProfile(BaseModel):
    """The only profile fields exposed to unauthenticated visitors"""

    id: str
    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True
