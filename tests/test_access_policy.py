"""
tests.test_access_policy

AccessRule decisions and their HTTP rendering.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

import httpx
import pytest

from teacher_ratings.auth.models import Claims, Role
from teacher_ratings.auth.policy import AccessRule, require, require_identity
from teacher_ratings.errors import Forbidden, InvalidToken, Unauthenticated


def _claims(role: Role) -> Claims:
    now = datetime.now(UTC)
    return Claims(
        subject=uuid.uuid4(),
        username="u",
        email="u@example.com",
        role=role,
        issued_at=now,
        expires_at=now,
    )


def test_public_accepts_anyone() -> None:
    assert require(None, AccessRule.public) is None
    user = _claims(Role.user)
    assert require(user, AccessRule.public) is user


def test_authenticated_requires_identity() -> None:
    with pytest.raises(Unauthenticated):
        require(None, AccessRule.authenticated)
    user = _claims(Role.user)
    assert require(user, AccessRule.authenticated) is user


def test_admin_only_separates_401_from_403() -> None:
    with pytest.raises(Unauthenticated) as anon:
        require(None, AccessRule.admin_only)
    assert not isinstance(anon.value, Forbidden)

    with pytest.raises(Forbidden):
        require(_claims(Role.user), AccessRule.admin_only)

    admin = _claims(Role.admin)
    assert require(admin, AccessRule.admin_only) is admin


def test_require_identity_always_returns_claims() -> None:
    user = _claims(Role.user)
    assert require_identity(user) is user
    with pytest.raises(Unauthenticated):
        require_identity(None)
    # Public lets anonymous callers through `require`, but not here.
    with pytest.raises(Unauthenticated):
        require_identity(None, AccessRule.public)
    with pytest.raises(Forbidden):
        require_identity(user, AccessRule.admin_only)


def test_invalid_token_is_an_authentication_failure() -> None:
    assert issubclass(InvalidToken, Unauthenticated)
    assert InvalidToken.status_code == 401


@pytest.mark.asyncio
async def test_missing_token_on_protected_route(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/ratings/my")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "No token, authorization denied"}


@pytest.mark.asyncio
async def test_invalid_token_on_protected_route(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/ratings/my", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token is invalid, please try to login again"


@pytest.mark.asyncio
async def test_user_token_on_admin_route(client, make_user, auth_header) -> None:
    user = await make_user("carol")
    r = await client.get("/api/admin/users", headers=auth_header(user))
    assert r.status_code == 403
    assert r.json()["message"] == "The user is not an admin"


@pytest.mark.asyncio
async def test_admin_token_on_admin_route(client, make_user, auth_header) -> None:
    admin = await make_user("root", role=Role.admin)
    r = await client.get("/api/admin/users", headers=auth_header(admin))
    assert r.status_code == 200
    assert r.json()["success"] is True


@pytest.mark.asyncio
async def test_public_route_ignores_bad_token(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/teachers", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 200
