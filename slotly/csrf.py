"""
CSRF Protection Middleware

Double-submit cookie pattern:
- Every response without a csrf_token cookie gets a fresh one
- State-changing requests must echo the cookie value in X-CSRF-Token
- Requests authenticated with a bearer header and the auth callback are exempt

Set CSRF_ENABLED=false to disable, for local development and tests only.
"""

import logging
import secrets
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import COOKIE_SECURE

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"

PROTECTED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Prefix matches
EXEMPT_PREFIXES = (
    "/auth/callback",
    "/health",
    "/docs",
    "/openapi.json",
    "/csrf-token",
)
# Exact matches only; a "/" prefix would exempt everything
EXEMPT_EXACT = {"/"}


def generate_csrf_token() -> str:
    """Generate a cryptographically secure CSRF token"""
    return secrets.token_urlsafe(32)


def is_path_exempt(path: str) -> bool:
    if path in EXEMPT_EXACT:
        return True
    return any(path.startswith(prefix) for prefix in EXEMPT_PREFIXES)


def set_csrf_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=False,  # the frontend reads it to echo in the header
        secure=COOKIE_SECURE,
        samesite="strict",
        max_age=86400,
        path="/",
    )


def _reject(request: Request, reason: str) -> JSONResponse:
    logger.warning(f"🚫 CSRF: {reason} for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=403,
        content={"error": f"{reason}. Please refresh the page and try again."},
    )


class CSRFMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME)

        bearer = request.headers.get("Authorization", "").lower().startswith("bearer ")
        needs_validation = (
            request.method in PROTECTED_METHODS
            and not bearer
            and not is_path_exempt(request.url.path)
        )

        if needs_validation:
            csrf_header = request.headers.get(CSRF_HEADER_NAME)
            if not csrf_cookie:
                return _reject(request, "CSRF token missing")
            if not csrf_header:
                return _reject(request, "CSRF token header missing")
            if not secrets.compare_digest(csrf_cookie, csrf_header):
                return _reject(request, "CSRF token invalid")
            logger.debug(f"✅ CSRF: Valid token for {request.method} {request.url.path}")

        response = await call_next(request)

        already_set = any(
            value.startswith(f"{CSRF_COOKIE_NAME}=")
            for value in response.headers.getlist("set-cookie")
        )
        if not csrf_cookie and not already_set:
            set_csrf_cookie(response, generate_csrf_token())
        return response


async def csrf_token_endpoint(request: Request, response: Response):
    """Hand the frontend the current token, issuing one when absent"""
    existing_token = request.cookies.get(CSRF_COOKIE_NAME)
    if existing_token:
        return {"csrf_token": existing_token}

    new_token = generate_csrf_token()
    set_csrf_cookie(response, new_token)
    return {"csrf_token": new_token}
