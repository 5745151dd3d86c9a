"""
teacher_ratings.api.app

FastAPI app factory for the teacher ratings service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Attach security headers to every response.
- Fail fast when the token signing secret is missing.
- Initialize and dispose shared infrastructure (DB engine/session factory) in the lifespan.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teacher_ratings import __version__
from teacher_ratings.api.envelope import install_error_handlers
from teacher_ratings.api.routers.admin import router as admin_router
from teacher_ratings.api.routers.auth import router as auth_router
from teacher_ratings.api.routers.health import router as health_router
from teacher_ratings.api.routers.ratings import router as ratings_router
from teacher_ratings.api.routers.submissions import router as submissions_router
from teacher_ratings.api.routers.teachers import router as teachers_router
from teacher_ratings.auth.jwt import IdentityService
from teacher_ratings.db.init_db import init_db, seed_admin
from teacher_ratings.db.session import create_engine, create_sessionmaker
from teacher_ratings.errors import ServerMisconfigured
from teacher_ratings.observability.logging import configure_logging, get_logger
from teacher_ratings.observability.middleware import RequestContextMiddleware
from teacher_ratings.observability.security import SecurityHeadersMiddleware
from teacher_ratings.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    try:
        identity = IdentityService.from_settings(settings)
    except ServerMisconfigured:
        log.error("jwt_secret_missing", hint="set TR_JWT_SECRET")
        raise

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schema comes from Alembic migrations.
            await init_db(engine)
        await seed_admin(app.state.sessionmaker, settings)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Teacher Ratings",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.identity = identity

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    install_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(teachers_router)
    app.include_router(ratings_router)
    app.include_router(submissions_router)
    app.include_router(admin_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Settings and the identity service hang off `app.state` from construction; the engine
# and sessionmaker only exist while the lifespan is running.
