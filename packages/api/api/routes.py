"""API route definitions."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.auth import (
    COOKIE_NAME,
    SESSION_TTL,
    SessionService,
    get_session_service,
    read_session,
    require_admin,
)
from api.config import Settings
from api.schemas import (
    LoginRequest,
    LoginResponse,
    OkResponse,
    SessionStatus,
    ZoneResponse,
    ZoneWriteRequest,
)
from database.ZoneRepository import ZoneRepository
from database.errors import ZoneWriteError

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@router.get("/health")
async def health_check():
    """Basic liveness probe -- no auth required."""
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def _repository_dependency(request: Request) -> ZoneRepository:
    """Retrieve the shared ZoneRepository from app state."""
    return request.app.state.repository


async def _json_body(request: Request) -> Any:
    """Return the decoded JSON body, or None if it is missing or malformed."""
    try:
        return await request.json()
    except ValueError:
        return None


def resolve_zone_key(value: Any, settings: Settings) -> str:
    """Use an explicit non-blank key, else the configured default."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return settings.default_zone_key


def _login_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"ok": False, "error": message}
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@router.post("/api/login", response_model=LoginResponse)
async def login(
    request: Request,
    response: Response,
    settings: Settings = Depends(_settings_dependency),
    sessions: SessionService = Depends(get_session_service),
):
    """Exchange an allow-listed username/password for a session cookie."""
    try:
        body = LoginRequest.model_validate(await _json_body(request) or {})
    except ValidationError:
        return _login_error(status.HTTP_400_BAD_REQUEST, "Missing credentials")

    username = body.username.strip()
    password = body.password.strip()
    if not username or not password:
        return _login_error(status.HTTP_400_BAD_REQUEST, "Missing credentials")

    if not settings.credentials:
        return _login_error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Developer credentials are not configured",
        )

    if not sessions.authenticate(username, password):
        logger.info("Rejected login for '%s'", username)
        return _login_error(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")

    response.set_cookie(
        COOKIE_NAME,
        sessions.sign(username),
        max_age=int(SESSION_TTL.total_seconds()),
        **sessions.cookie_options(),
    )
    logger.info("Admin session issued for '%s'", username)
    return LoginResponse(ok=True, admin=True)


@router.post("/api/logout", response_model=OkResponse)
async def logout(
    response: Response,
    sessions: SessionService = Depends(get_session_service),
):
    """Clear the session cookie."""
    response.delete_cookie(COOKIE_NAME, **sessions.cookie_options())
    return OkResponse()


@router.get("/api/session", response_model=SessionStatus)
async def get_session(
    request: Request,
    sessions: SessionService = Depends(get_session_service),
):
    """Report whether the caller's cookie holds a valid session."""
    session = read_session(request, sessions)
    if not session:
        return SessionStatus(authenticated=False, admin=False)
    return SessionStatus(authenticated=True, admin=session.get("role") == "admin")


# ---------------------------------------------------------------------------
# Zone documents
# ---------------------------------------------------------------------------


@router.get("/api/zone", response_model=ZoneResponse)
async def get_zone(
    key: str | None = None,
    settings: Settings = Depends(_settings_dependency),
    repository: ZoneRepository = Depends(_repository_dependency),
):
    """Return the document for a zone, or ``null`` if none is stored."""
    return ZoneResponse(data=repository.read(resolve_zone_key(key, settings)))


@router.post("/api/zone", response_model=OkResponse)
async def save_zone(
    request: Request,
    session: dict = Depends(require_admin),
    settings: Settings = Depends(_settings_dependency),
    repository: ZoneRepository = Depends(_repository_dependency),
):
    """Replace a zone's document.  Admin only.

    The document is stored exactly as sent once its top-level shape checks
    out.
    """
    raw = await _json_body(request)
    try:
        body = ZoneWriteRequest.model_validate(raw)
    except ValidationError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid zone payload"},
        )

    key = resolve_zone_key(body.key, settings)
    try:
        repository.write(key, raw["data"])
    except ZoneWriteError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    logger.info("Zone '%s' saved by '%s'", key, session.get("sub"))
    return OkResponse()
