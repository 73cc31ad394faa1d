"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.auth import SessionService
from api.config import Settings
from api.routes import router
from database.DatabaseProvider import DatabaseProvider
from database.ZoneRepository import ZoneRepository
from database.ZoneStore import LocalZoneFile, SupabaseZoneStore

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> ZoneRepository:
    """Wire the Supabase store (when configured) and the local mirror."""
    remote = None
    if settings.supabase_configured:
        provider = DatabaseProvider(settings.supabase_url, settings.supabase_key)
        remote = SupabaseZoneStore(provider.get_client(), settings.table)

    local = (
        LocalZoneFile(settings.local_data_path)
        if settings.local_data_path is not None
        else None
    )
    return ZoneRepository(remote=remote, local=local)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Report the effective configuration once the server starts."""
    settings: Settings = app.state.settings
    repository: ZoneRepository = app.state.repository
    if not settings.is_production:
        usernames = [c.username for c in settings.credentials]
        logger.info("Loaded developer usernames: %s", usernames or "(none)")
    logger.info(
        "Zone storage: remote=%s local=%s",
        "supabase" if repository.remote is not None else "off",
        repository.local.path if repository.local is not None else "off",
    )
    yield


def create_app(
    settings: Settings | None = None,
    repository: ZoneRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Service configuration; read from the environment (and a
            ``.env`` file) when omitted.
        repository: Zone storage; built from ``settings`` when omitted.

    Returns:
        The configured application.
    """
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()

    app = FastAPI(
        title="EduDash API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.sessions = SessionService(settings)
    app.state.repository = repository or build_repository(settings)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Without an explicit list every origin is reflected back.
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)
    return app


def serve() -> None:
    """Start the uvicorn server using environment configuration."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
