"""
teacher_ratings.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Build request-scoped services from a session.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from teacher_ratings.auth.deps import identity_service
from teacher_ratings.auth.jwt import IdentityService
from teacher_ratings.services.accounts import AccountService
from teacher_ratings.services.moderation import ModerationWorkflow
from teacher_ratings.services.rating_ledger import RatingLedger
from teacher_ratings.services.teacher_directory import TeacherDirectory
from teacher_ratings.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`teacher_ratings.api.app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed by the service layer.
    async with session_factory() as session:
        yield session


def rating_ledger(session: AsyncSession = Depends(db_session)) -> RatingLedger:
    return RatingLedger(session=session)


def moderation(session: AsyncSession = Depends(db_session)) -> ModerationWorkflow:
    return ModerationWorkflow(session=session)


def teacher_directory(session: AsyncSession = Depends(db_session)) -> TeacherDirectory:
    return TeacherDirectory(session=session)


def accounts(
    session: AsyncSession = Depends(db_session),
    identity: IdentityService = Depends(identity_service),
    settings: Settings = Depends(settings_dep),
) -> AccountService:
    return AccountService(session=session, identity=identity, bcrypt_rounds=settings.bcrypt_rounds)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches `db_session` per request, so services built for the same request
# share one session and one transaction.
