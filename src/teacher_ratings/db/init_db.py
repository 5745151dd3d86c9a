"""
teacher_ratings.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Bootstrap the configured admin account.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from teacher_ratings.auth.models import Role
from teacher_ratings.auth.passwords import hash_password
from teacher_ratings.db.base import Base
from teacher_ratings.db.repositories.users import UserRepo
from teacher_ratings.observability.logging import get_logger
from teacher_ratings.settings import Settings

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production runs Alembic migrations instead.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_admin(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    if not (settings.admin_username and settings.admin_email and settings.admin_password):
        return

    async with session_factory() as session:
        users = UserRepo(session)
        existing = await users.get_by_username(settings.admin_username)
        if existing is not None:
            if existing.role is not Role.admin:
                existing.role = Role.admin
                await session.commit()
                log.info("admin_promoted", username=settings.admin_username)
            return

        await users.create(
            username=settings.admin_username,
            email=settings.admin_email,
            password_hash=hash_password(settings.admin_password, rounds=settings.bcrypt_rounds),
            role=Role.admin,
        )
        await session.commit()
        log.info("admin_seeded", username=settings.admin_username)
