import logging
from typing import Callable

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .auth import has_session_cookie
from .config import DASHBOARD_PATH, SIGN_IN_URL

logger = logging.getLogger(__name__)


def is_protected_path(path: str) -> bool:
    return path == DASHBOARD_PATH or path.startswith(f"{DASHBOARD_PATH}/")


class SessionGateMiddleware(BaseHTTPMiddleware):
    """
    Sends visitors without a session cookie to the sign-in page before any
    dashboard handler runs. Only cookie presence is checked here; the
    handlers still validate the session itself.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if is_protected_path(request.url.path) and not has_session_cookie(request):
            logger.info(f"🔒 No session cookie for {request.url.path}, redirecting to sign-in")
            return RedirectResponse(url=SIGN_IN_URL, status_code=307)
        return await call_next(request)
