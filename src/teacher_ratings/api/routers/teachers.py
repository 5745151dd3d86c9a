"""
teacher_ratings.api.routers.teachers

Public teacher endpoints under `/api/teachers` (plus admin creation).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.status import HTTP_201_CREATED

from teacher_ratings.api.deps import rating_ledger, teacher_directory
from teacher_ratings.api.envelope import ok, rating_view, teacher_admin_view, teacher_public
from teacher_ratings.auth.deps import get_admin
from teacher_ratings.auth.models import Claims
from teacher_ratings.services.rating_ledger import RatingLedger
from teacher_ratings.services.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/api/teachers", tags=["teachers"])


class TeacherCreateRequest(BaseModel):
    name: Any = None
    description: Any = None


@router.get("")
async def list_teachers(
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    teachers, pagination = await directory.list_public(search=search, page=page, limit=limit)
    return ok([teacher_public(t) for t in teachers], pagination=pagination)


@router.get("/{teacher_id}")
async def get_teacher(
    teacher_id: str,
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    return ok(teacher_public(await directory.get(teacher_id)))


@router.get("/{teacher_id}/ratings")
async def list_teacher_ratings(
    teacher_id: str,
    page: str | None = None,
    limit: str | None = None,
    ledger: RatingLedger = Depends(rating_ledger),
) -> dict[str, Any]:
    ratings, pagination = await ledger.list_for_teacher(teacher_id, page=page, limit=limit)
    return ok([rating_view(r, public=True) for r in ratings], pagination=pagination)


@router.post("", status_code=HTTP_201_CREATED)
async def create_teacher(
    body: TeacherCreateRequest,
    admin: Claims = Depends(get_admin),
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    teacher = await directory.create(actor=admin, name=body.name, description=body.description)
    return ok(teacher_admin_view(teacher), message="Teacher created successfully")
