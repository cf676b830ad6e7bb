"""Main FastAPI application."""
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    api_exception_handler,
    validation_exception_handler,
)
from .api.routes import auth, users
from .bootstrap import bootstrap_admin
from .config import Settings
from .config import settings as default_settings
from .core.exceptions import BaseAPIException
from .core.logging import configure_logging
from .core.sessions import SessionManager
from .database import Database
from .schemas.common import HealthResponse

logger = structlog.get_logger("sitegate.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    configure_logging(settings.monitoring)
    await database.init_db()

    bootstrap = settings.bootstrap
    if bootstrap.on_startup:
        if bootstrap.admin_email and bootstrap.admin_password:
            await bootstrap_admin(
                database, app.state.sessions, bootstrap.admin_email, bootstrap.admin_password
            )
        else:
            logger.warning("Startup bootstrap enabled without admin email/password")

    yield

    # Shutdown
    await database.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        lifespan=lifespan
    )

    # Process-owned collaborators, handed to requests through app.state
    app.state.settings = settings
    app.state.database = Database(settings.database)
    app.state.sessions = SessionManager(settings.auth)

    # Exception handlers
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Add middleware
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    async def health():
        database_ok = await app.state.database.ping()
        return HealthResponse(
            status="healthy" if database_ok else "degraded",
            version=settings.api.version,
            services={"database": "connected" if database_ok else "disconnected"},
        )

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sitegate.main:create_app",
        factory=True,
        host=default_settings.api.host,
        port=default_settings.api.port,
        reload=default_settings.api.reload,
    )
