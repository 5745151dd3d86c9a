"""
teacher_ratings.api.routers.submissions

Teacher proposal endpoints for authenticated users under `/api/submissions`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.status import HTTP_201_CREATED

from teacher_ratings.api.deps import moderation
from teacher_ratings.api.envelope import ok, submission_view
from teacher_ratings.auth.deps import get_claims
from teacher_ratings.auth.models import Claims
from teacher_ratings.services.moderation import ModerationWorkflow

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


class SubmissionRequest(BaseModel):
    name: Any = None
    description: Any = None


@router.post("", status_code=HTTP_201_CREATED)
async def propose_teacher(
    body: SubmissionRequest,
    claims: Claims = Depends(get_claims),
    workflow: ModerationWorkflow = Depends(moderation),
) -> dict[str, Any]:
    sub = await workflow.propose(actor=claims, name=body.name, description=body.description)
    return ok(submission_view(sub), message="投稿成功，等待审核")


@router.get("/my")
async def my_submissions(
    claims: Claims = Depends(get_claims),
    workflow: ModerationWorkflow = Depends(moderation),
) -> dict[str, Any]:
    return ok([submission_view(s) for s in await workflow.list_for_user(actor=claims)])
