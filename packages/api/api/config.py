"""Service configuration.

Everything the service needs is read once from the environment into a
:class:`Settings` object, which is then handed to the session service, the
zone repository and the routes.  Nothing reads ``os.environ`` after startup.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-secret-change-me"
DEFAULT_TABLE = "dashboard_data"
DEFAULT_ZONE_KEY = "default"
DEFAULT_LOCAL_DATA_PATH = "folder-structure.json"
MAX_CREDENTIALS = 3

SameSite = Literal["lax", "strict", "none"]


class ConfigError(RuntimeError):
    """Raised in strict mode when a required secret is missing."""


class Credential(BaseModel):
    """One admin username/password pair."""

    username: str
    password: str


# Developer roster used outside production when none is configured.
FALLBACK_DEV_CREDENTIALS = [
    Credential(username="Brij Bhushan", password="10368"),
    Credential(username="Moulik Garg", password="10730"),
    Credential(username="Rehan", password="10820"),
]


class Settings(BaseModel):
    """Resolved service configuration."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    table: str = DEFAULT_TABLE
    default_zone_key: str = DEFAULT_ZONE_KEY
    local_data_path: Path | None = Path(DEFAULT_LOCAL_DATA_PATH)
    jwt_secret: str = DEV_JWT_SECRET
    cors_origins: list[str] | None = None
    cookie_samesite: SameSite = "lax"
    cookie_secure: bool = False
    credentials: list[Credential] = []
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Missing secrets degrade the service (file-only storage, development
        signing secret) and are logged.  With ``STRICT_CONFIG=true`` they
        are fatal instead.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``.

        Raises:
            ConfigError: In strict mode, if Supabase credentials or
                ``JWT_SECRET`` are missing.
            ValueError: If ``PORT`` is not an integer.
        """
        env = os.environ if environ is None else environ
        environment = (env.get("APP_ENV") or "development").strip().lower()
        strict = parse_bool(env.get("STRICT_CONFIG"))

        supabase_url = (env.get("SUPABASE_URL") or "").strip() or None
        supabase_key = (env.get("SUPABASE_SERVICE_ROLE_KEY") or "").strip() or None
        if not (supabase_url and supabase_key):
            if strict:
                raise ConfigError(
                    "Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY in environment"
                )
            logger.warning(
                "Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY. "
                "Supabase features will be unavailable."
            )

        jwt_secret = (env.get("JWT_SECRET") or "").strip()
        if not jwt_secret:
            if strict:
                raise ConfigError("Missing JWT_SECRET in environment")
            logger.warning("Missing JWT_SECRET. Using a default for development only.")
            jwt_secret = DEV_JWT_SECRET

        same_site = normalize_same_site(env.get("COOKIE_SAMESITE"))
        raw_secure = env.get("COOKIE_SECURE")
        if raw_secure is not None:
            secure = parse_bool(raw_secure)
        else:
            secure = environment == "production" or same_site == "none"
        if same_site == "none" and not secure:
            logger.warning(
                "COOKIE_SAMESITE=none requires COOKIE_SECURE=true. Forcing secure cookies."
            )
            secure = True

        raw_origins = env.get("CORS_ORIGIN")
        cors_origins = (
            [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
            if raw_origins
            else None
        )

        raw_path = env.get("LOCAL_DATA_PATH", DEFAULT_LOCAL_DATA_PATH).strip()

        return cls(
            supabase_url=supabase_url,
            supabase_key=supabase_key,
            table=(env.get("SUPABASE_TABLE") or DEFAULT_TABLE).strip(),
            default_zone_key=(env.get("SUPABASE_ZONE_ID") or DEFAULT_ZONE_KEY).strip(),
            local_data_path=Path(raw_path) if raw_path else None,
            jwt_secret=jwt_secret,
            cors_origins=cors_origins or None,
            cookie_samesite=same_site,
            cookie_secure=secure,
            credentials=load_credentials(env, environment),
            environment=environment,
            host=env.get("API_HOST", "0.0.0.0"),
            port=int(env.get("PORT", "8080")),
        )


def parse_bool(value: str | None) -> bool:
    return value is not None and value.strip().lower() in ("true", "1")


def normalize_same_site(value: str | None) -> SameSite:
    """Map a raw ``COOKIE_SAMESITE`` value onto lax/strict/none (default lax)."""
    if not isinstance(value, str):
        return "lax"
    normalized = value.strip().lower()
    if normalized == "strict":
        return "strict"
    if normalized == "none":
        return "none"
    return "lax"


def strip_quotes(value: str) -> str:
    """Drop one leading and one trailing quote character, if present."""
    if value[:1] in ("'", '"'):
        value = value[1:]
    if value[-1:] in ("'", '"'):
        value = value[:-1]
    return value


def load_credentials(env: Mapping[str, str], environment: str) -> list[Credential]:
    """Read ``DEV_USER_n``/``DEV_PASS_n`` pairs (n = 1..3).

    Incomplete pairs are skipped.  When none are configured, the fallback
    developer roster is used outside production; in production the list is
    empty and logins are refused.
    """
    credentials = []
    for n in range(1, MAX_CREDENTIALS + 1):
        username = strip_quotes((env.get(f"DEV_USER_{n}") or "").strip())
        password = strip_quotes((env.get(f"DEV_PASS_{n}") or "").strip())
        if username and password:
            credentials.append(Credential(username=username, password=password))

    if credentials:
        return credentials

    if environment != "production":
        logger.warning(
            "No developer credentials configured in environment. "
            "Using fallback dev credentials."
        )
        return [c.model_copy() for c in FALLBACK_DEV_CREDENTIALS]

    logger.warning("No developer credentials configured in environment")
    return []
