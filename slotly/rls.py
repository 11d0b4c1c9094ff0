"""
Row-Level Security (RLS) context for database sessions.

The policies in migrations/001_row_level_security.sql compare each row's
owner column against the `app.current_user_id` setting. The auth gateway sets
it once per request, right after the caller's identity is resolved.
"""

import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _supports_rls(db: Session) -> bool:
    return db.get_bind().dialect.name == "postgresql"


def set_rls_context(db: Session, user_id: str) -> None:
    """
    Set the RLS context for a database session.

    No-op on databases without row security (SQLite in development and tests).

    Args:
        db: SQLAlchemy database session
        user_id: ID of the authenticated user
    """
    if not _supports_rls(db):
        return

    try:
        db.execute(
            text("SELECT set_config('app.current_user_id', :user_id, false)"),
            {"user_id": str(user_id)},
        )
        logger.debug(f"RLS context set for user_id={user_id}")
    except Exception as e:
        logger.error(f"Failed to set RLS context for user_id={user_id}: {e}")
        raise


def clear_rls_context(db: Session) -> None:
    """
    Clear the RLS context for a database session.

    Args:
        db: SQLAlchemy database session
    """
    if not _supports_rls(db):
        return

    try:
        db.rollback()
        db.execute(text("SELECT set_config('app.current_user_id', '', false)"))
        # A rolled-back set_config is undone, so this one has to commit
        db.commit()
        logger.debug("RLS context cleared")
    except Exception as e:
        logger.error(f"Failed to clear RLS context: {e}")
