"""Cookie-based admin sessions."""

import hmac
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, Request, status

from api.config import Settings

COOKIE_NAME = "edudash_session"
SESSION_TTL = timedelta(hours=12)
_ALGORITHM = "HS256"


class SessionService:
    """Sign and verify the JWT carried in the session cookie.

    Sessions are stateless: there is no revocation list, a token stays
    valid until it expires.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def sign(self, username: str) -> str:
        """Return a token for ``username`` with the admin role."""
        now = datetime.now(timezone.utc)
        claims = {
            "sub": username,
            "role": "admin",
            "iat": now,
            "exp": now + SESSION_TTL,
        }
        return jwt.encode(claims, self._settings.jwt_secret, algorithm=_ALGORITHM)

    def verify(self, token: str | None) -> dict | None:
        """Return the token's claims, or None if it is missing or invalid.

        Bad signatures, expired tokens and garbage all look the same to the
        caller.
        """
        if not token:
            return None
        try:
            return jwt.decode(
                token, self._settings.jwt_secret, algorithms=[_ALGORITHM]
            )
        except jwt.PyJWTError:
            return None

    def cookie_options(self) -> dict:
        """Attributes shared by setting and clearing the session cookie."""
        return {
            "httponly": True,
            "samesite": self._settings.cookie_samesite,
            "secure": self._settings.cookie_secure,
            "path": "/",
        }

    def authenticate(self, username: str, password: str) -> bool:
        """Check a trimmed username/password pair against the allow-list."""
        username = username.strip()
        password = password.strip()
        return any(
            hmac.compare_digest(entry.username, username)
            and hmac.compare_digest(entry.password, password)
            for entry in self._settings.credentials
        )


def get_session_service(request: Request) -> SessionService:
    """Retrieve the shared SessionService from app state."""
    return request.app.state.sessions


def read_session(request: Request, sessions: SessionService) -> dict | None:
    return sessions.verify(request.cookies.get(COOKIE_NAME))


async def require_admin(
    request: Request,
    sessions: SessionService = Depends(get_session_service),
) -> dict:
    """Require a valid admin session cookie.

    Returns:
        The session claims.

    Raises:
        HTTPException 401 if the cookie is missing, invalid, expired or not
        an admin session.
    """
    session = read_session(request, sessions)
    if not session or session.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return session
