"""HTTP client for the zone service.

Reads fail open to the built-in document; writes and logins report failure
through :class:`ApiResult` instead of raising.
"""

import logging
import os
from dataclasses import dataclass

import httpx

from dashboard.defaults import default_zone
from dashboard.errors import InvalidContentError
from dashboard.models import ZoneData

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 10.0


@dataclass
class ApiResult:
    """Outcome of a state-changing call."""

    ok: bool
    error: str | None = None


def _error_from(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return fallback


class ZoneClient:
    """Talks to ``/api/zone`` and the session endpoints.

    The underlying ``httpx.Client`` keeps the session cookie between calls,
    so a successful :meth:`login` authorises later :meth:`save_zone` calls.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a client.

        Args:
            base_url: Server root; trailing slashes are ignored.
            client: Pre-configured httpx client (its own base URL wins).
        """
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"), timeout=DEFAULT_TIMEOUT
        )

    @classmethod
    def from_env(cls) -> "ZoneClient":
        """Build a client for ``EDUDASH_API_URL`` (or the local default)."""
        return cls(os.environ.get("EDUDASH_API_URL") or DEFAULT_BASE_URL)

    def close(self) -> None:
        self._client.close()

    # -- zone ---------------------------------------------------------------

    def fetch_zone(self, key: str | None = None) -> ZoneData:
        """Load the zone document, or the built-in one on any failure."""
        params = {"key": key} if key else None
        try:
            response = self._client.get("/api/zone", params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch zone data: %s", e)
            return default_zone()

        data = payload.get("data") if isinstance(payload, dict) else None
        if data is None:
            return default_zone()
        try:
            return ZoneData.from_dict(data)
        except InvalidContentError as e:
            logger.error("Server returned a malformed zone document: %s", e)
            return default_zone()

    def save_zone(self, data: ZoneData, key: str | None = None) -> ApiResult:
        """Write the zone document; requires an admin session."""
        body: dict = {"data": data.to_dict()}
        if key:
            body["key"] = key
        try:
            response = self._client.post("/api/zone", json=body)
        except httpx.HTTPError as e:
            logger.error("Failed to save zone data: %s", e)
            return ApiResult(ok=False, error="Network error")

        if response.is_success:
            return ApiResult(ok=True)
        return ApiResult(ok=False, error=_error_from(response, "Failed to save"))

    # -- session ------------------------------------------------------------

    def login(self, username: str, password: str) -> ApiResult:
        try:
            response = self._client.post(
                "/api/login", json={"username": username, "password": password}
            )
        except httpx.HTTPError as e:
            logger.error("Login request failed: %s", e)
            return ApiResult(ok=False, error="Network error")

        if response.is_success:
            return ApiResult(ok=True)
        return ApiResult(ok=False, error=_error_from(response, "Login failed"))

    def logout(self) -> ApiResult:
        try:
            response = self._client.post("/api/logout")
        except httpx.HTTPError as e:
            logger.error("Logout request failed: %s", e)
            return ApiResult(ok=False, error="Network error")
        self._client.cookies.clear()
        if response.is_success:
            return ApiResult(ok=True)
        return ApiResult(ok=False, error=_error_from(response, "Logout failed"))

    def session(self) -> dict:
        """Return ``{"authenticated": bool, "admin": bool}``; False on errors."""
        anonymous = {"authenticated": False, "admin": False}
        try:
            response = self._client.get("/api/session")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Session check failed: %s", e)
            return anonymous
        if not isinstance(payload, dict):
            return anonymous
        return {
            "authenticated": bool(payload.get("authenticated")),
            "admin": bool(payload.get("admin")),
        }
