"""
teacher_ratings.api.routers.health

Liveness (`/healthz`) and readiness (`/readyz`) probes.

Readiness requires the schema, not just a connection: a database without the
`teachers` table (migrations not applied) is reported as not ready.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from teacher_ratings.api.deps import db_session, settings_dep
from teacher_ratings.observability.logging import get_logger
from teacher_ratings.settings import Settings

log = get_logger(__name__)

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz", response_model=None)
async def readyz(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, str] | JSONResponse:
    try:
        await session.execute(text("SELECT 1 FROM teachers LIMIT 1"))
    except SQLAlchemyError as e:
        log.warning("readiness_failed", error=str(e))
        return JSONResponse(status_code=HTTP_503_SERVICE_UNAVAILABLE, content={"status": "not ready"})
    return {"status": "ready", "env": settings.env}
