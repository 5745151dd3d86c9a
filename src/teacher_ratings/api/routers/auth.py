"""
teacher_ratings.api.routers.auth

Account endpoints under `/api/auth`.

Responsibilities:
- Register, log in (token issuance), read and update the caller's profile.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_201_CREATED

from teacher_ratings.api.deps import accounts
from teacher_ratings.api.envelope import ok, user_summary
from teacher_ratings.auth.deps import get_claims
from teacher_ratings.auth.models import Claims
from teacher_ratings.services.accounts import AccountService

router = APIRouter(prefix="/api/auth", tags=["auth"])


# Fields are loosely typed: the service owns validation and its error messages.
class RegisterRequest(BaseModel):
    username: Any = None
    email: Any = None
    password: Any = None


class LoginRequest(BaseModel):
    username: Any = None
    email: Any = None
    password: Any = None


class ProfilePatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Any = Field(default=None, alias="firstName")
    last_name: Any = Field(default=None, alias="lastName")


class ProfileUpdateRequest(BaseModel):
    email: Any = None
    password: Any = None
    profile: ProfilePatch | None = None


@router.post("/register", status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    svc: AccountService = Depends(accounts),
) -> dict[str, Any]:
    user = await svc.register(username=body.username, email=body.email, password=body.password)
    return ok(user_summary(user), message="User registered successfully")


@router.post("/login")
async def login(
    body: LoginRequest,
    svc: AccountService = Depends(accounts),
) -> dict[str, Any]:
    token, user = await svc.login(username=body.username, email=body.email, password=body.password)
    return ok(message="Login successful", jwt=token, user=user_summary(user))


@router.get("/profile")
async def get_profile(
    claims: Claims = Depends(get_claims),
    svc: AccountService = Depends(accounts),
) -> dict[str, Any]:
    return ok(user_summary(await svc.profile(actor=claims)))


@router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    claims: Claims = Depends(get_claims),
    svc: AccountService = Depends(accounts),
) -> dict[str, Any]:
    profile = body.profile.model_dump(by_alias=True, exclude_none=True) if body.profile else None
    user = await svc.update_profile(
        actor=claims, email=body.email, password=body.password, profile=profile
    )
    return ok(user_summary(user), message="Profile updated successfully")
