"""
teacher_ratings.db.repositories.ratings

Repository for `Rating` entities.

Responsibilities:
- Insert ratings (the (user_id, teacher_id) unique constraint is the duplicate guard).
- Query ratings per teacher (paginated), per user, and globally.
- Delete single ratings or every rating of a teacher.
"""

from __future__ import annotations

import uuid

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.db.models import Rating


class RatingRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        teacher_id: uuid.UUID,
        user_id: uuid.UUID,
        score: int,
        comment: str,
        is_anonymous: bool,
    ) -> Rating:
        # Raises IntegrityError on a duplicate (user_id, teacher_id) pair.
        rating = Rating(
            teacher_id=teacher_id,
            user_id=user_id,
            score=score,
            comment=comment,
            is_anonymous=is_anonymous,
        )
        self._session.add(rating)
        await self._session.flush()
        return rating

    async def get(self, rating_id: uuid.UUID) -> Rating | None:
        return await self._session.get(Rating, rating_id)

    async def exists_for(self, *, user_id: uuid.UUID, teacher_id: uuid.UUID) -> bool:
        stmt = select(Rating.id).where(Rating.user_id == user_id, Rating.teacher_id == teacher_id)
        return (await self._session.execute(stmt)).first() is not None

    async def list_for_teacher(
        self, teacher_id: uuid.UUID, *, offset: int = 0, limit: int = 10
    ) -> list[Rating]:
        stmt = (
            select(Rating)
            .where(Rating.teacher_id == teacher_id)
            .order_by(desc(Rating.created_at), Rating.id)
            .offset(offset)
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count_for_teacher(self, teacher_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Rating).where(Rating.teacher_id == teacher_id)
        return int((await self._session.execute(stmt)).scalar_one())

    async def list_for_user(self, user_id: uuid.UUID) -> list[Rating]:
        stmt = select(Rating).where(Rating.user_id == user_id).order_by(desc(Rating.created_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_all(self) -> list[Rating]:
        stmt = select(Rating).order_by(desc(Rating.created_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, rating_id: uuid.UUID) -> bool:
        stmt = (
            delete(Rating)
            .where(Rating.id == rating_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def delete_for_teacher(self, teacher_id: uuid.UUID) -> int:
        stmt = (
            delete(Rating)
            .where(Rating.teacher_id == teacher_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)
