"""FastAPI application entry point for the Klystra agency API."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from klystra_agency.api.errors import register_exception_handlers
from klystra_agency.api.routes import auth, contact, health, projects, upload
from klystra_agency.config import Settings
from klystra_agency.data.db import Database
from klystra_agency.data.repository import Repository
from klystra_agency.services.media import UPLOADS_URL_PREFIX
from klystra_agency.services.sessions import SessionStore
from klystra_agency.services.upload_storage import UploadStorage

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, database: Database | None = None) -> FastAPI:
    """Build a fully wired application.

    Args:
        settings: Configuration to use; read from the environment when omitted.
        database: An existing database to serve from. When omitted one is
            created from ``settings.database_url`` and disposed on shutdown.

    Returns:
        FastAPI: The application, with its collaborators on ``app.state``.
    """
    settings = settings or Settings.from_env()
    owns_database = database is None
    database = database or Database(settings.database_url)
    database.create_all()

    uploads = UploadStorage(settings.upload_dir, max_bytes=settings.max_upload_bytes)
    uploads.ensure_root()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Warn about unsafe production settings and release the engine on shutdown."""
        if settings.is_production and settings.uses_default_secret:
            logger.warning("SESSION_SECRET is not set; using the development default")
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(
        title="Klystra Agency API",
        description="Contact form, project portfolio and admin backend for the agency website",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = Repository(database)
    app.state.sessions = SessionStore(settings.session_secret, settings.session_ttl)
    app.state.uploads = uploads

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(log_api_requests)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api")
    app.include_router(contact.router, prefix="/api")
    app.include_router(projects.router, prefix="/api")
    app.include_router(upload.router, prefix="/api")
    app.mount(
        UPLOADS_URL_PREFIX.rstrip("/"),
        StaticFiles(directory=uploads.root),
        name="uploads",
    )
    return app


async def log_api_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log method, path, status and duration of every ``/api`` request."""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d in %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
    return response


def main() -> None:
    """Start the server."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = Settings.from_env()
    uvicorn.run(
        "klystra_agency.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    main()
