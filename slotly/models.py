import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"

    # Same value as the auth provider's user id
    id = Column(String(36), primary_key=True)
    username = Column(String(30), unique=True, index=True, nullable=True)  # null until chosen
    full_name = Column(String(100), nullable=True)
    timezone = Column(String(64), default="UTC", nullable=False)
    locale = Column(String(16), default="en-US", nullable=False)
    avatar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event_types = relationship(
        "EventType", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )


class EventType(Base):
    __tablename__ = "event_types"
    __table_args__ = (UniqueConstraint("user_id", "event_slug", name="uq_event_types_owner_slug"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String(100), nullable=False)
    event_slug = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, default=30, nullable=False)
    location_type = Column(String(20), default="zoom", nullable=False)
    location_value = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    color = Column(String(7), default="#3B82F6", nullable=True)  # e.g., #RRGGBB
    buffer_before = Column(Integer, default=0, nullable=False)  # minutes
    buffer_after = Column(Integer, default=0, nullable=False)  # minutes
    min_notice_hours = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("Profile", back_populates="event_types")
