"""
Public booking page

GET /{username}/{event_slug} needs no session. The first matching state wins:
unknown user, then missing or inactive event type, then the booking view.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import PUBLIC_PAGE_RATE_LIMIT
from ..database import get_db
from ..domain.event_types.service import EventTypeService
from ..domain.profiles.schemas import PublicProfile
from ..domain.profiles.service import ProfileService
from ..errors import AppError, Unexpected
from ..forms.timezone_selector import TimezoneSelector
from ..models import EventType
from ..rate_limiter import create_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Public Booking"])

public_page_limit = create_rate_limiter(
    limit=PUBLIC_PAGE_RATE_LIMIT, window_seconds=60, key_prefix="public_page"
)

NOT_FOUND_VIEW = {
    "state": "not_found",
    "title": "Page Not Found",
    "message": "This user does not exist.",
}

UNAVAILABLE_VIEW = {
    "state": "unavailable",
    "title": "Event Unavailable",
    "message": "This event type is not currently available for booking.",
}

SCHEDULER_PLACEHOLDER = {
    "available": False,
    "title": "Calendar & Time Slots",
    "message": "Time slot selection will be available in Phase 2",
}


def location_label(location_type: str) -> str:
    """"google_meet" -> "Google Meet" """
    return location_type.replace("_", " ", 1).title()


def host_view(profile: PublicProfile) -> dict:
    return {
        "full_name": profile.full_name,
        "username": f"@{profile.username}",
        "avatar_url": profile.avatar_url,
        "initial": None if profile.avatar_url else (profile.full_name or "U")[0].upper(),
    }


def event_view(event_type: EventType) -> dict:
    view = {
        "title": event_type.title,
        "duration_minutes": event_type.duration_minutes,
        "description": event_type.description or None,
        "location": {
            "type": event_type.location_type,
            "label": location_label(event_type.location_type),
            "value": event_type.location_value or None,
        },
        "color": event_type.color,
    }

    buffers = {}
    if event_type.buffer_before > 0:
        buffers["before_minutes"] = event_type.buffer_before
    if event_type.buffer_after > 0:
        buffers["after_minutes"] = event_type.buffer_after
    if buffers:
        view["buffers"] = buffers

    if event_type.min_notice_hours > 0:
        view["min_notice_hours"] = event_type.min_notice_hours

    return view


def build_booking_view(
    db: Session, username: str, event_slug: str, timezone: Optional[str] = None
) -> tuple[int, dict]:
    """Resolve the page state; returns (status_code, body)"""
    profile = ProfileService(db).get_public_profile(username)
    if profile is None:
        return 404, dict(NOT_FOUND_VIEW)

    event_type = EventTypeService(db).get_public_event_type(profile.id, event_slug)
    if event_type is None or not event_type.is_active:
        return 404, dict(UNAVAILABLE_VIEW)

    selector = TimezoneSelector(default_value=timezone)
    return 200, {
        "state": "booking",
        "host": host_view(profile),
        "event": event_view(event_type),
        "timezone": selector.to_dict(),
        "scheduler": dict(SCHEDULER_PLACEHOLDER),
    }


@router.get("/{username}/{event_slug}")
async def public_booking_page(
    username: str,
    event_slug: str,
    timezone: Optional[str] = None,
    db: Session = Depends(get_db),
    _: None = Depends(public_page_limit),
):
    try:
        status_code, body = build_booking_view(db, username, event_slug, timezone)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to render booking page /{username}/{event_slug}: {e}")
        raise Unexpected(operation="public_booking_page", username=username) from e

    if status_code != 200:
        logger.info(f"Booking page /{username}/{event_slug}: {body['state']}")
    return JSONResponse(status_code=status_code, content=body)
