import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from ..auth import AuthClient, AuthProviderError, get_auth_client
from ..config import (
    AUTH_CALLBACK_RATE_LIMIT,
    CODE_VERIFIER_COOKIE_NAME,
    COOKIE_SECURE,
    DASHBOARD_PATH,
    SESSION_COOKIE_MARKERS,
    SESSION_COOKIE_NAME,
    SIGN_IN_URL,
)
from ..database import get_db
from ..domain.profiles.service import ProfileService
from ..rate_limiter import create_rate_limiter
from ..rls import set_rls_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

auth_callback_limit = create_rate_limiter(
    limit=AUTH_CALLBACK_RATE_LIMIT, window_seconds=60, key_prefix="auth_callback"
)


@router.get("/callback")
async def auth_callback(
    request: Request,
    code: Optional[str] = None,
    db: Session = Depends(get_db),
    auth_client: AuthClient = Depends(get_auth_client),
    _: None = Depends(auth_callback_limit),
):
    """
    Landing point after sign-in with the provider.

    Exchanges the one-time code for a session, stores the access token in the
    session cookie and sends the browser on to the dashboard. A failed
    exchange goes back to sign-in. Without a code there is nothing to
    exchange and the dashboard's own gate decides.
    """
    if not code:
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)

    code_verifier = request.cookies.get(CODE_VERIFIER_COOKIE_NAME)
    try:
        session = await auth_client.exchange_code_for_session(code, code_verifier)
    except AuthProviderError as e:
        logger.warning(f"⚠️ Code exchange failed: {e}")
        return RedirectResponse(url=SIGN_IN_URL, status_code=303)

    try:
        set_rls_context(db, session.identity.user_id)
        ProfileService(db).ensure_profile(session.identity)
    except Exception as e:
        # The session is valid; the dashboard retries profile creation
        logger.error(f"❌ Failed to ensure profile for {session.identity.user_id}: {e}")
        db.rollback()

    logger.info(f"✅ User {session.identity.user_id} signed in")
    response = RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.access_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=session.expires_in,
        path="/",
    )
    if code_verifier:
        response.delete_cookie(CODE_VERIFIER_COOKIE_NAME, path="/")
    return response


@router.post("/sign-out")
async def sign_out(request: Request):
    """Drop every session cookie the browser sent"""
    response = JSONResponse({"message": "Signed out"})
    names = {SESSION_COOKIE_NAME}
    names.update(
        name for name in request.cookies if any(marker in name for marker in SESSION_COOKIE_MARKERS)
    )
    for name in sorted(names):
        response.delete_cookie(name, path="/")
    logger.info("👋 Session cookies cleared")
    return response
