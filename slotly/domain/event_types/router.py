"""Event type router - REST endpoints for a single event type"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_identity
from ...database import get_db
from ...errors import AppError, Unexpected
from .schemas import EventTypeResponse
from .service import EventTypeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/event-types", tags=["Event Types"])


def get_event_type_service(db: Session = Depends(get_db)) -> EventTypeService:
    """Dependency injection for EventTypeService"""
    return EventTypeService(db)


@router.get("/{event_type_id}")
async def get_event_type(
    event_type_id: str,
    identity: Identity = Depends(get_current_identity),
    service: EventTypeService = Depends(get_event_type_service),
):
    """Get one of the caller's event types"""
    try:
        event_type = service.get_event_type(event_type_id, identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to load event type {event_type_id}: {e}")
        raise Unexpected(operation="get_event_type", event_type_id=event_type_id) from e

    return {"data": EventTypeResponse.model_validate(event_type)}


@router.put("/{event_type_id}")
async def update_event_type(
    event_type_id: str,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: EventTypeService = Depends(get_event_type_service),
):
    """Partially update an event type; only the fields sent are written"""
    try:
        try:
            payload = await request.json()
        except ValueError:
            # Not JSON; the schema check reports it after the ownership check
            payload = None
        event_type = service.update_event_type(event_type_id, payload, identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to update event type {event_type_id}: {e}")
        service.db.rollback()
        raise Unexpected(operation="update_event_type", event_type_id=event_type_id) from e

    return {"data": EventTypeResponse.model_validate(event_type)}


@router.delete("/{event_type_id}")
async def delete_event_type(
    event_type_id: str,
    identity: Identity = Depends(get_current_identity),
    service: EventTypeService = Depends(get_event_type_service),
):
    """Delete an event type"""
    try:
        return service.delete_event_type(event_type_id, identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to delete event type {event_type_id}: {e}")
        service.db.rollback()
        raise Unexpected(operation="delete_event_type", event_type_id=event_type_id) from e
