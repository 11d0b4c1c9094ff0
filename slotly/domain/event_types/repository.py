"""Event type repository - Database operations for event types"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import EventType


class EventTypeRepository:
    """Repository for event type database operations"""

    @staticmethod
    def get_event_types(db: Session, user_id: str) -> list[EventType]:
        """Get all event types owned by a user, newest first"""
        return (
            db.query(EventType)
            .filter(EventType.user_id == user_id)
            .order_by(EventType.created_at.desc())
            .all()
        )

    @staticmethod
    def count_event_types(db: Session, user_id: str) -> int:
        return db.query(func.count(EventType.id)).filter(EventType.user_id == user_id).scalar()

    @staticmethod
    def get_event_type_by_id(db: Session, event_type_id: str) -> Optional[EventType]:
        """Get an event type by ID regardless of owner"""
        return db.query(EventType).filter(EventType.id == event_type_id).first()

    @staticmethod
    def get_owned_event_type(db: Session, event_type_id: str, user_id: str) -> Optional[EventType]:
        """Get an event type by ID, only if the user owns it"""
        return (
            db.query(EventType)
            .filter(EventType.id == event_type_id, EventType.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_owner_id(db: Session, event_type_id: str) -> Optional[str]:
        """Get only the owner column, for ownership checks"""
        row = db.query(EventType.user_id).filter(EventType.id == event_type_id).first()
        return row[0] if row else None

    @staticmethod
    def get_event_type_by_slug(db: Session, user_id: str, event_slug: str) -> Optional[EventType]:
        return (
            db.query(EventType)
            .filter(EventType.user_id == user_id, EventType.event_slug == event_slug)
            .first()
        )

    @staticmethod
    def create_event_type(db: Session, user_id: str, **event_type_data) -> EventType:
        """Create a new event type"""
        event_type = EventType(user_id=user_id, **event_type_data)
        db.add(event_type)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(event_type)
        return event_type

    @staticmethod
    def update_event_type(db: Session, event_type: EventType, **updates) -> EventType:
        """
        Write the given fields. Unlike a sparse form update, an explicit None
        here is written, so optional columns can be cleared.
        """
        for key, value in updates.items():
            if hasattr(event_type, key):
                setattr(event_type, key, value)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        db.refresh(event_type)
        return event_type

    @staticmethod
    def delete_event_type(db: Session, event_type: EventType) -> None:
        """Delete an event type"""
        db.delete(event_type)
        db.commit()
