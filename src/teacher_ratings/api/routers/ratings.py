"""
teacher_ratings.api.routers.ratings

Rating endpoints for authenticated users under `/api/ratings`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_201_CREATED

from teacher_ratings.api.deps import rating_ledger
from teacher_ratings.api.envelope import ok, rating_view
from teacher_ratings.auth.deps import get_claims
from teacher_ratings.auth.models import Claims
from teacher_ratings.services.rating_ledger import RatingLedger

router = APIRouter(prefix="/api/ratings", tags=["ratings"])


class RatingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped: the ledger validates score and comment in its own order.
    teacher_id: Any = Field(default=None, alias="teacherId")
    rating: Any = None
    comment: Any = None
    is_anonymous: bool = Field(default=False, alias="isAnonymous")


@router.post("", status_code=HTTP_201_CREATED)
async def submit_rating(
    body: RatingRequest,
    claims: Claims = Depends(get_claims),
    ledger: RatingLedger = Depends(rating_ledger),
) -> dict[str, Any]:
    rating = await ledger.submit(
        actor=claims,
        teacher_id=body.teacher_id,
        score=body.rating,
        comment=body.comment,
        is_anonymous=body.is_anonymous,
    )
    return ok(rating_view(rating), message="Rating submitted successfully")


@router.get("/my")
async def my_ratings(
    claims: Claims = Depends(get_claims),
    ledger: RatingLedger = Depends(rating_ledger),
) -> dict[str, Any]:
    return ok([rating_view(r) for r in await ledger.list_for_user(actor=claims)])
