"""
teacher_ratings.api.routers.admin

Administrator endpoints under `/api/admin`.

Responsibilities:
- Teacher catalogue management (create, approve/deactivate, delete with ratings).
- User moderation (list, ban/unban).
- Rating moderation (list, delete with aggregate correction).
- Submission review (list pending, approve into a teacher, reject).

Every route requires an admin token; the services re-check the rule so they stay safe
outside HTTP.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_201_CREATED

from teacher_ratings.api.deps import accounts, moderation, rating_ledger, teacher_directory
from teacher_ratings.api.envelope import (
    ok,
    rating_view,
    submission_view,
    teacher_admin_view,
    user_admin_view,
)
from teacher_ratings.auth.deps import get_admin
from teacher_ratings.auth.models import Claims
from teacher_ratings.services.accounts import AccountService
from teacher_ratings.services.moderation import Decision, ModerationWorkflow
from teacher_ratings.services.rating_ledger import RatingLedger
from teacher_ratings.services.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(get_admin)])


class TeacherCreateRequest(BaseModel):
    name: Any = None
    description: Any = None


class DecisionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin_note: str | None = Field(default=None, alias="adminNote")


# Teachers


@router.get("/teachers")
async def list_teachers(
    admin: Claims = Depends(get_admin),
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    return ok([teacher_admin_view(t) for t in await directory.list_all(actor=admin)])


@router.post("/teachers", status_code=HTTP_201_CREATED)
async def create_teacher(
    body: TeacherCreateRequest,
    admin: Claims = Depends(get_admin),
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    teacher = await directory.create(actor=admin, name=body.name, description=body.description)
    return ok(teacher_admin_view(teacher), message="教师创建成功")


@router.post("/teachers/{teacher_id}/approve")
async def approve_teacher(
    teacher_id: str,
    admin: Claims = Depends(get_admin),
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    teacher = await directory.set_active(actor=admin, teacher_id=teacher_id, active=True)
    return ok(teacher_admin_view(teacher), message="教师审核通过")


@router.post("/teachers/{teacher_id}/deactivate")
async def deactivate_teacher(
    teacher_id: str,
    admin: Claims = Depends(get_admin),
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    teacher = await directory.set_active(actor=admin, teacher_id=teacher_id, active=False)
    return ok(teacher_admin_view(teacher), message="教师已停用")


@router.delete("/teachers/{teacher_id}")
async def delete_teacher(
    teacher_id: str,
    admin: Claims = Depends(get_admin),
    directory: TeacherDirectory = Depends(teacher_directory),
) -> dict[str, Any]:
    removed = await directory.delete(actor=admin, teacher_id=teacher_id)
    return ok({"removedRatings": removed}, message="教师已删除")


# Users


@router.get("/users")
async def list_users(
    admin: Claims = Depends(get_admin),
    svc: AccountService = Depends(accounts),
) -> dict[str, Any]:
    return ok([user_admin_view(u) for u in await svc.list_users(actor=admin)])


@router.post("/users/{user_id}/toggle")
async def toggle_user(
    user_id: str,
    admin: Claims = Depends(get_admin),
    svc: AccountService = Depends(accounts),
) -> dict[str, Any]:
    user = await svc.toggle_active(actor=admin, user_id=user_id)
    return ok(user_admin_view(user), message="用户已启用" if user.is_active else "用户已封禁")


# Ratings


@router.get("/ratings")
async def list_ratings(
    admin: Claims = Depends(get_admin),
    ledger: RatingLedger = Depends(rating_ledger),
) -> dict[str, Any]:
    return ok([rating_view(r) for r in await ledger.list_all(actor=admin)])


@router.delete("/ratings/{rating_id}")
async def delete_rating(
    rating_id: str,
    admin: Claims = Depends(get_admin),
    ledger: RatingLedger = Depends(rating_ledger),
) -> dict[str, Any]:
    await ledger.remove(actor=admin, rating_id=rating_id)
    return ok(message="评价已删除")


# Submissions


@router.get("/submissions")
async def list_submissions(
    admin: Claims = Depends(get_admin),
    workflow: ModerationWorkflow = Depends(moderation),
) -> dict[str, Any]:
    return ok([submission_view(s) for s in await workflow.list_pending(actor=admin)])


@router.post("/submissions/{submission_id}/approve")
async def approve_submission(
    submission_id: str,
    body: DecisionRequest | None = None,
    admin: Claims = Depends(get_admin),
    workflow: ModerationWorkflow = Depends(moderation),
) -> dict[str, Any]:
    outcome = await workflow.decide(
        actor=admin,
        submission_id=submission_id,
        decision=Decision.approve,
        note=body.admin_note if body else None,
    )
    return ok(
        {
            "submission": submission_view(outcome.submission),
            "teacher": teacher_admin_view(outcome.teacher) if outcome.teacher else None,
        },
        message="投稿已通过，教师已添加",
    )


@router.post("/submissions/{submission_id}/reject")
async def reject_submission(
    submission_id: str,
    body: DecisionRequest | None = None,
    admin: Claims = Depends(get_admin),
    workflow: ModerationWorkflow = Depends(moderation),
) -> dict[str, Any]:
    outcome = await workflow.decide(
        actor=admin,
        submission_id=submission_id,
        decision=Decision.reject,
        note=body.admin_note if body else None,
    )
    return ok(submission_view(outcome.submission), message="投稿已拒绝")
