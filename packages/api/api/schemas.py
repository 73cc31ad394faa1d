"""Pydantic request/response models for the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class LoginRequest(BaseModel):
    """Body for the login endpoint."""

    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    ok: bool = True
    admin: bool = True


class OkResponse(BaseModel):
    ok: bool = True


class SessionStatus(BaseModel):
    """Whether the caller holds a valid session."""

    authenticated: bool
    admin: bool


class ZonePayload(BaseModel):
    """Shape check for a zone document.

    Only the top-level sections are checked; the document itself is stored
    exactly as received.
    """

    model_config = ConfigDict(extra="allow")

    categories: list[Any]
    videos: list[Any]
    contents: list[Any] | None = None

    @field_validator("contents", mode="before")
    @classmethod
    def _contents_must_be_list(cls, value: Any) -> Any:
        # Absent is fine; an explicit null is not.
        if value is None:
            raise ValueError("contents must be a list when present")
        return value


class ZoneWriteRequest(BaseModel):
    """Body for ``POST /api/zone``."""

    key: Any = None
    data: ZonePayload


class ZoneResponse(BaseModel):
    """Response from ``GET /api/zone``."""

    data: dict[str, Any] | None
