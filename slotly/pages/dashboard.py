"""
Dashboard page controllers

Each handler returns the data its page renders. Form submissions run through
the same form state the editor uses; on success the body carries a redirect
target, on failure a 400 with the per-field errors.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..auth import Identity, get_current_identity
from ..config import DASHBOARD_PATH
from ..database import get_db
from ..domain.event_types.schemas import EventTypeResponse
from ..domain.event_types.service import EventTypeService
from ..domain.profiles.schemas import ProfileResponse, ProfileUpdate
from ..domain.profiles.service import ProfileService
from ..errors import AppError, Unexpected, ValidationFailed
from ..forms.event_type_form import (
    DURATION_OPTIONS,
    LOCATION_TYPES,
    PRESET_COLORS,
    EventTypeForm,
)
from ..shared.validation import validate_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix=DASHBOARD_PATH, tags=["Dashboard"])

EVENT_TYPES_PATH = f"{DASHBOARD_PATH}/event-types"


async def read_json_object(request: Request) -> dict:
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise ValidationFailed([{"path": [], "message": "Request body must be a JSON object"}])
    return payload


def form_options() -> dict:
    return {
        "durations": list(DURATION_OPTIONS),
        "location_types": [{"value": k, "label": v} for k, v in LOCATION_TYPES.items()],
        "colors": list(PRESET_COLORS),
    }


def form_view(form: EventTypeForm) -> dict:
    return {
        "values": dict(form.values),
        "slug_manually_edited": form.slug_manually_edited,
        "show_location_value": form.show_location_value,
        "errors": dict(form.errors),
        "options": form_options(),
    }


def profile_form_values(profile) -> dict:
    return {
        "username": profile.username or "",
        "full_name": profile.full_name or "",
        "timezone": profile.timezone or "",
        "locale": profile.locale or "",
    }


@router.get("")
async def dashboard_home(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Overview: who is signed in and how many event types they have"""
    try:
        profile = ProfileService(db).ensure_profile(identity)
        count = EventTypeService(db).count_event_types(identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to load dashboard for {identity.user_id}: {e}")
        db.rollback()
        raise Unexpected(operation="dashboard_home") from e

    return {
        "profile": ProfileResponse.model_validate(profile),
        "email": identity.email,
        "event_type_count": count,
        "needs_username": not profile.username,
    }


@router.get("/event-types")
async def list_event_types(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    try:
        event_types = EventTypeService(db).get_event_types(identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to list event types for {identity.user_id}: {e}")
        raise Unexpected(operation="list_event_types") from e

    return {"data": [EventTypeResponse.model_validate(et) for et in event_types]}


@router.get("/event-types/new")
async def new_event_type_form(identity: Identity = Depends(get_current_identity)):
    """Blank editor state with defaults"""
    return form_view(EventTypeForm())


@router.post("/event-types/new", status_code=201)
async def create_event_type(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    try:
        raw = await read_json_object(request)
        form = EventTypeForm().apply(raw)
        data = form.submit()
        event_type = EventTypeService(db).create_event_type(data, identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to create event type for {identity.user_id}: {e}")
        db.rollback()
        raise Unexpected(operation="create_event_type") from e

    logger.info(f"✅ Event type {event_type.id} created by {identity.user_id}")
    return {"data": EventTypeResponse.model_validate(event_type), "redirect": EVENT_TYPES_PATH}


@router.get("/event-types/{event_type_id}/edit")
async def edit_event_type_form(
    event_type_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    try:
        event_type = EventTypeService(db).get_event_type(event_type_id, identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to load event type {event_type_id}: {e}")
        raise Unexpected(operation="edit_event_type_form", event_type_id=event_type_id) from e

    initial = EventTypeResponse.model_validate(event_type).model_dump()
    view = form_view(EventTypeForm(initial))
    view["id"] = event_type.id
    return view


@router.post("/event-types/{event_type_id}/edit")
async def update_event_type(
    event_type_id: str,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    service = EventTypeService(db)
    try:
        event_type = service.get_event_type(event_type_id, identity)
        initial = EventTypeResponse.model_validate(event_type).model_dump()
        raw = await read_json_object(request)
        data = EventTypeForm(initial).apply(raw).submit()
        event_type = service.replace_event_type(event_type_id, data, identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to update event type {event_type_id}: {e}")
        db.rollback()
        raise Unexpected(operation="update_event_type", event_type_id=event_type_id) from e

    return {"data": EventTypeResponse.model_validate(event_type), "redirect": EVENT_TYPES_PATH}


@router.get("/profile")
async def profile_form(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    try:
        profile = ProfileService(db).get_own_profile(identity)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to load profile for {identity.user_id}: {e}")
        raise Unexpected(operation="profile_form") from e

    return {"values": profile_form_values(profile), "avatar_url": profile.avatar_url}


@router.post("/profile")
async def update_profile(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    try:
        raw = await read_json_object(request)
        data = validate_payload(ProfileUpdate, raw)
        profile = ProfileService(db).update_own_profile(identity, data)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to update profile for {identity.user_id}: {e}")
        db.rollback()
        raise Unexpected(operation="update_profile") from e

    return {
        "data": ProfileResponse.model_validate(profile),
        "message": "Profile updated successfully!",
    }
