import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import (
    AUTH_ANON_KEY,
    AUTH_TIMEOUT_SECONDS,
    AUTH_URL,
    CODE_VERIFIER_COOKIE_NAME,
    SESSION_COOKIE_MARKERS,
    SESSION_COOKIE_NAME,
)
from .database import get_db
from .errors import Unauthorized, Unexpected
from .rls import set_rls_context

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller. Passed explicitly into every resource operation."""

    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    expires_in: int
    identity: Identity


class AuthProviderError(Exception):
    """The auth provider could not be reached or refused a code exchange"""


def _identity_from_user(user: dict) -> Identity:
    metadata = user.get("user_metadata") or {}
    return Identity(
        user_id=str(user["id"]),
        email=user.get("email"),
        full_name=metadata.get("full_name") or metadata.get("name"),
        avatar_url=metadata.get("avatar_url"),
    )


class AuthClient:
    """Client for the hosted auth provider's REST API"""

    def __init__(
        self,
        base_url: str = AUTH_URL,
        api_key: str = AUTH_ANON_KEY,
        timeout: float = AUTH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _headers(self, access_token: Optional[str] = None) -> dict:
        headers = {"apikey": self.api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def get_user(self, access_token: str) -> Optional[Identity]:
        """
        Resolve an access token to the user it belongs to.

        Returns None when the provider rejects the token.

        Raises:
            AuthProviderError: If the provider is unreachable or misbehaves
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user", headers=self._headers(access_token)
                )
        except httpx.HTTPError as e:
            raise AuthProviderError(f"Auth provider unreachable: {e}") from e

        if response.status_code in (401, 403):
            logger.info(f"🔒 Auth provider rejected session token (HTTP {response.status_code})")
            return None
        if response.status_code != 200:
            raise AuthProviderError(f"Auth provider returned HTTP {response.status_code}")

        try:
            user = response.json()
        except ValueError as e:
            raise AuthProviderError("Auth provider returned invalid JSON") from e
        if not isinstance(user, dict) or not user.get("id"):
            logger.warning("⚠️ Auth provider returned a user without an id")
            return None
        return _identity_from_user(user)

    async def exchange_code_for_session(
        self, code: str, code_verifier: Optional[str] = None
    ) -> AuthSession:
        """
        Exchange an OAuth/magic-link authorization code for a session.

        Raises:
            AuthProviderError: If the exchange fails for any reason
        """
        payload = {"auth_code": code}
        if code_verifier:
            payload["code_verifier"] = code_verifier

        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/auth/v1/token",
                    params={"grant_type": "pkce"},
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            raise AuthProviderError(f"Auth provider unreachable: {e}") from e

        if response.status_code != 200:
            raise AuthProviderError(f"Code exchange failed with HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthProviderError("Code exchange returned invalid JSON") from e
        user = data.get("user") or {}
        if not data.get("access_token") or not user.get("id"):
            raise AuthProviderError("Code exchange response missing session")

        return AuthSession(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=int(data.get("expires_in", 3600)),
            identity=_identity_from_user(user),
        )


_auth_client: Optional[AuthClient] = None


def get_auth_client() -> AuthClient:
    """Dependency returning the shared auth provider client"""
    global _auth_client
    if _auth_client is None:
        _auth_client = AuthClient()
    return _auth_client


def _is_session_cookie(name: str) -> bool:
    if name == CODE_VERIFIER_COOKIE_NAME or name.endswith("-code-verifier"):
        return False
    return any(marker in name for marker in SESSION_COOKIE_MARKERS)


def has_session_cookie(request: Request) -> bool:
    """True when the request carries any cookie that looks like an auth session"""
    return any(_is_session_cookie(name) for name in request.cookies)


def find_session_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials] = None
) -> Optional[str]:
    """Bearer header first, then our session cookie, then any session-marked cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    for name, value in request.cookies.items():
        if value and _is_session_cookie(name):
            return value
    return None


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    auth_client: AuthClient = Depends(get_auth_client),
) -> Identity:
    """Resolve the caller's identity. Establishes who, never checks what."""
    token = find_session_token(request, credentials)
    if not token:
        logger.info(f"🔒 No session for {request.method} {request.url.path}")
        raise Unauthorized()

    try:
        identity = await auth_client.get_user(token)
    except AuthProviderError as e:
        logger.error(f"❌ Session check failed: {e}")
        raise Unexpected(operation="get_user") from e

    if identity is None:
        raise Unauthorized()

    set_rls_context(db, identity.user_id)
    logger.debug(f"✅ User authenticated: {identity.user_id}")
    return identity
