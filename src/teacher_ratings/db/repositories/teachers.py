"""
teacher_ratings.db.repositories.teachers

Repository for `Teacher` entities.

Responsibilities:
- CRUD and listing (active-only search with pagination, admin full list).
- Atomic aggregate updates: every change to rating_count/rating_sum is a single
  `UPDATE ... SET col = col + :n` so concurrent ledger writes never lose an increment.
"""

from __future__ import annotations

import uuid

from sqlalchemy import case, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.db.models import Teacher


def _like_pattern(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TeacherRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, name: str, description: str, is_active: bool) -> Teacher:
        teacher = Teacher(
            name=name,
            description=description,
            is_active=is_active,
            rating_count=0,
            rating_sum=0,
        )
        self._session.add(teacher)
        await self._session.flush()
        return teacher

    async def get(self, teacher_id: uuid.UUID) -> Teacher | None:
        # Aggregates change through bulk UPDATEs; always re-read them.
        return await self._session.get(Teacher, teacher_id, populate_existing=True)

    async def get_by_name(self, name: str) -> Teacher | None:
        stmt = select(Teacher).where(Teacher.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    def _active_filter(self, search: str | None):
        clauses = [Teacher.is_active.is_(True)]
        if search:
            clauses.append(Teacher.name.ilike(_like_pattern(search), escape="\\"))
        return clauses

    async def list_active(
        self, *, search: str | None = None, offset: int = 0, limit: int = 20
    ) -> list[Teacher]:
        stmt = (
            select(Teacher)
            .where(*self._active_filter(search))
            .order_by(desc(Teacher.created_at), Teacher.id)
            .offset(offset)
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count_active(self, *, search: str | None = None) -> int:
        stmt = select(func.count()).select_from(Teacher).where(*self._active_filter(search))
        return int((await self._session.execute(stmt)).scalar_one())

    async def list_all(self) -> list[Teacher]:
        stmt = select(Teacher).order_by(desc(Teacher.created_at), Teacher.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_active(self, teacher_id: uuid.UUID, active: bool) -> Teacher | None:
        teacher = await self._session.get(
            Teacher, teacher_id, with_for_update=True, populate_existing=True
        )
        if teacher is None:
            return None
        teacher.is_active = active
        await self._session.flush()
        return teacher

    async def apply_rating(self, teacher_id: uuid.UUID, score: int) -> bool:
        stmt = (
            update(Teacher)
            .where(Teacher.id == teacher_id)
            .values(
                rating_count=Teacher.rating_count + 1,
                rating_sum=Teacher.rating_sum + score,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def retract_rating(self, teacher_id: uuid.UUID, score: int) -> bool:
        # Floored at zero; both SET expressions read the pre-update row.
        stmt = (
            update(Teacher)
            .where(Teacher.id == teacher_id)
            .values(
                rating_count=case(
                    (Teacher.rating_count > 0, Teacher.rating_count - 1), else_=0
                ),
                rating_sum=case(
                    (Teacher.rating_sum >= score, Teacher.rating_sum - score), else_=0
                ),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def delete(self, teacher_id: uuid.UUID) -> bool:
        stmt = (
            delete(Teacher)
            .where(Teacher.id == teacher_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1
