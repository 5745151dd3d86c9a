"""
teacher_ratings.services.rating_ledger

Rating ledger (transaction + persistence owner for ratings).

Responsibilities:
- Accept at most one rating per (user, teacher) and credit the teacher's aggregate.
- Remove ratings (admin) and debit the aggregate in the same transaction.
- Serve rating listings per teacher, per user, and for admins.

Validation order on submit is part of the contract: reference, teacher existence,
teacher active, score, duplicate, comment. The first failing check wins.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.auth.models import Claims
from teacher_ratings.auth.policy import AccessRule, require, require_identity
from teacher_ratings.db.models import (
    COMMENT_MAX_LENGTH,
    COMMENT_MIN_LENGTH,
    SCORE_MAX,
    SCORE_MIN,
    Rating,
)
from teacher_ratings.db.repositories.ratings import RatingRepo
from teacher_ratings.db.repositories.teachers import TeacherRepo
from teacher_ratings.errors import (
    CommentTooLong,
    CommentTooShort,
    DuplicateRating,
    Inactive,
    InvalidScore,
    NotFound,
    ServerFault,
)
from teacher_ratings.ids import parse_entity_id
from teacher_ratings.observability.logging import get_logger
from teacher_ratings.services.pagination import Pagination, paginate, parse_page

log = get_logger(__name__)

TEACHER_NOT_FOUND = "This teacher does not exists"
RATING_NOT_FOUND = "评价不存在"


def coerce_score(raw: Any) -> int:
    # JSON clients may send 4.0 for 4; booleans are ints in Python but not scores.
    if isinstance(raw, bool):
        raise InvalidScore()
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if not isinstance(raw, int) or not SCORE_MIN <= raw <= SCORE_MAX:
        raise InvalidScore()
    return raw


def normalize_comment(raw: Any) -> str:
    text = raw.strip() if isinstance(raw, str) else ""
    if len(text) < COMMENT_MIN_LENGTH:
        raise CommentTooShort()
    if len(text) > COMMENT_MAX_LENGTH:
        raise CommentTooLong()
    return text


class RatingLedger:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._ratings = RatingRepo(session)
        self._teachers = TeacherRepo(session)

    async def submit(
        self,
        *,
        actor: Claims | None,
        teacher_id: Any,
        score: Any,
        comment: Any,
        is_anonymous: bool = False,
    ) -> Rating:
        claims = require_identity(actor)

        tid = parse_entity_id(teacher_id, "teacherId")
        teacher = await self._teachers.get(tid)
        if teacher is None:
            raise NotFound(TEACHER_NOT_FOUND)
        if not teacher.is_active:
            raise Inactive()

        value = coerce_score(score)

        # Fast path for the common duplicate; the unique constraint below is the real guard.
        if await self._ratings.exists_for(user_id=claims.subject, teacher_id=tid):
            raise DuplicateRating()

        text = normalize_comment(comment)

        try:
            rating = await self._ratings.add(
                teacher_id=tid,
                user_id=claims.subject,
                score=value,
                comment=text,
                is_anonymous=bool(is_anonymous),
            )
            if not await self._teachers.apply_rating(tid, value):
                raise NotFound(TEACHER_NOT_FOUND)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise await self._explain_conflict(user_id=claims.subject, teacher_id=tid) from e
        except Exception:
            await self._session.rollback()
            raise

        log.info(
            "rating_submitted",
            rating_id=str(rating.id),
            teacher_id=str(tid),
            user_id=str(claims.subject),
            score=value,
        )
        return rating

    async def _explain_conflict(self, *, user_id: uuid.UUID, teacher_id: uuid.UUID) -> Exception:
        # A concurrent request won the (user, teacher) slot, or the teacher vanished mid-insert.
        if await self._ratings.exists_for(user_id=user_id, teacher_id=teacher_id):
            log.info("rating_duplicate_race", teacher_id=str(teacher_id), user_id=str(user_id))
            return DuplicateRating()
        if await self._teachers.get(teacher_id) is None:
            return NotFound(TEACHER_NOT_FOUND)
        log.error("rating_insert_conflict", teacher_id=str(teacher_id), user_id=str(user_id))
        return ServerFault("Server error during rating")

    async def list_for_teacher(
        self, teacher_id: Any, *, page: Any = None, limit: Any = None
    ) -> tuple[list[Rating], Pagination]:
        tid = parse_entity_id(teacher_id)
        if await self._teachers.get(tid) is None:
            raise NotFound("Teacher not found")

        req = parse_page(page, limit, default_limit=10)
        total = await self._ratings.count_for_teacher(tid)
        items = await self._ratings.list_for_teacher(tid, offset=req.offset, limit=req.limit)
        return items, paginate(req, total)

    async def list_for_user(self, *, actor: Claims | None) -> list[Rating]:
        claims = require_identity(actor)
        return await self._ratings.list_for_user(claims.subject)

    async def list_all(self, *, actor: Claims | None) -> list[Rating]:
        require(actor, AccessRule.admin_only)
        return await self._ratings.list_all()

    async def remove(self, *, actor: Claims | None, rating_id: Any) -> None:
        require(actor, AccessRule.admin_only)

        rid = parse_entity_id(rating_id)
        rating = await self._ratings.get(rid)
        if rating is None:
            raise NotFound(RATING_NOT_FOUND)

        teacher_id, score = rating.teacher_id, rating.score
        try:
            # Debit first, then delete; a lost delete race rolls the debit back.
            await self._teachers.retract_rating(teacher_id, score)
            if not await self._ratings.delete(rid):
                raise NotFound(RATING_NOT_FOUND)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info("rating_removed", rating_id=str(rid), teacher_id=str(teacher_id), score=score)


# --- Module Notes -----------------------------------------------------------
# Aggregate arithmetic lives in `TeacherRepo.apply_rating/retract_rating` as single
# UPDATE statements; this service only decides when they run and commits them together
# with the rating row.
