"""
Pytest fixtures for the teacher ratings tests.

Every test gets its own SQLite file under `tmp_path` and an app whose lifespan is
entered explicitly (httpx's ASGITransport does not run it).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from teacher_ratings.api.app import create_app
from teacher_ratings.auth.jwt import IdentityService
from teacher_ratings.auth.models import Claims, Role
from teacher_ratings.auth.passwords import hash_password
from teacher_ratings.db.models import Teacher, User
from teacher_ratings.db.repositories.teachers import TeacherRepo
from teacher_ratings.db.repositories.users import UserRepo
from teacher_ratings.settings import Settings

PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def session_factory(app: FastAPI) -> async_sessionmaker[AsyncSession]:
    return app.state.sessionmaker


@pytest.fixture
def identity(app: FastAPI) -> IdentityService:
    return app.state.identity


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[User]]:
    async def _make(
        username: str = "alice",
        *,
        role: Role = Role.user,
        email: str | None = None,
        active: bool = True,
    ) -> User:
        async with session_factory() as session:
            user = await UserRepo(session).create(
                username=username,
                email=email or f"{username}@example.com",
                password_hash=hash_password(PASSWORD, rounds=4),
                role=role,
            )
            user.is_active = active
            await session.commit()
            return user

    return _make


@pytest.fixture
def make_teacher(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Teacher]]:
    async def _make(name: str = "张老师", *, active: bool = True, description: str = "") -> Teacher:
        async with session_factory() as session:
            teacher = await TeacherRepo(session).create(
                name=name, description=description, is_active=active
            )
            await session.commit()
            return teacher

    return _make


@pytest.fixture
def claims_for(identity: IdentityService) -> Callable[[User], Claims]:
    def _claims(user: User) -> Claims:
        return identity.verify(token_for(identity, user))

    return _claims


@pytest.fixture
def auth_header(identity: IdentityService) -> Callable[[User], dict[str, str]]:
    def _header(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(identity, user)}"}

    return _header


def token_for(identity: IdentityService, user: User) -> str:
    return identity.issue(
        subject=user.id, username=user.username, email=user.email, role=user.role
    )
