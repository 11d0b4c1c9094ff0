"""Event type service - Business logic for event type operations"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Identity
from ...errors import Forbidden, NotFound, ValidationFailed
from ...models import EventType
from ...shared.validation import validate_payload
from ..profiles.service import ProfileService
from .repository import EventTypeRepository
from .schemas import EventTypeCreate, EventTypeUpdate

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Event type not found"


def _slug_taken() -> ValidationFailed:
    return ValidationFailed(
        [{"path": ["event_slug"], "message": "You already have an event type with this slug"}]
    )


class EventTypeService:
    """Service layer for event type business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventTypeRepository()

    def get_event_types(self, identity: Identity) -> list[EventType]:
        """Get all event types for the caller, newest first"""
        return self.repo.get_event_types(self.db, identity.user_id)

    def count_event_types(self, identity: Identity) -> int:
        return self.repo.count_event_types(self.db, identity.user_id)

    def get_event_type(self, event_type_id: str, identity: Identity) -> EventType:
        """Get one of the caller's event types"""
        event_type = self.repo.get_owned_event_type(self.db, event_type_id, identity.user_id)
        if not event_type:
            raise NotFound(NOT_FOUND_MESSAGE)
        return event_type

    def _require_owner(self, event_type_id: str, identity: Identity) -> EventType:
        """Existence first (404), then ownership (403)"""
        owner_id = self.repo.get_owner_id(self.db, event_type_id)
        if owner_id is None:
            raise NotFound(NOT_FOUND_MESSAGE)
        if owner_id != identity.user_id:
            logger.warning(
                f"🚫 Access denied: user {identity.user_id} tried to modify event type {event_type_id}"
            )
            raise Forbidden()
        return self.repo.get_event_type_by_id(self.db, event_type_id)

    def create_event_type(self, data: EventTypeCreate, identity: Identity) -> EventType:
        logger.info(f"📥 Creating event type for user_id: {identity.user_id}")
        ProfileService(self.db).ensure_profile(identity)
        try:
            return self.repo.create_event_type(
                self.db, identity.user_id, **data.model_dump(exclude_none=True)
            )
        except IntegrityError as e:
            raise _slug_taken() from e

    def update_event_type(self, event_type_id: str, payload: Any, identity: Identity) -> EventType:
        """Partial update from the API. Ownership is checked before the payload."""
        event_type = self._require_owner(event_type_id, identity)
        data = validate_payload(EventTypeUpdate, payload)
        try:
            return self.repo.update_event_type(self.db, event_type, **data.changes())
        except IntegrityError as e:
            raise _slug_taken() from e

    def replace_event_type(
        self, event_type_id: str, data: EventTypeCreate, identity: Identity
    ) -> EventType:
        """Full update from the edit form, scoped to the caller's own records"""
        event_type = self.get_event_type(event_type_id, identity)
        try:
            return self.repo.update_event_type(self.db, event_type, **data.model_dump())
        except IntegrityError as e:
            raise _slug_taken() from e

    def delete_event_type(self, event_type_id: str, identity: Identity) -> dict:
        """Delete an event type. Unconditional once ownership is confirmed."""
        event_type = self._require_owner(event_type_id, identity)
        self.repo.delete_event_type(self.db, event_type)
        logger.info(f"🗑️ Event type {event_type_id} deleted by {identity.user_id}")
        return {"message": "Event type deleted successfully"}

    def get_public_event_type(self, owner_id: str, event_slug: str) -> Optional[EventType]:
        """Lookup for the public booking page; active-state gating is the caller's job"""
        return self.repo.get_event_type_by_slug(self.db, owner_id, event_slug)
