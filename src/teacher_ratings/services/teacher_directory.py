"""
teacher_ratings.services.teacher_directory

Teacher directory service.

Responsibilities:
- Public reads: active teacher listing with name search + pagination, teacher detail.
- Admin writes: create, activate/deactivate, delete (with the teacher's ratings).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.auth.models import Claims
from teacher_ratings.auth.policy import AccessRule, require
from teacher_ratings.db.models import Teacher
from teacher_ratings.db.repositories.ratings import RatingRepo
from teacher_ratings.db.repositories.teachers import TeacherRepo
from teacher_ratings.errors import DuplicateName, NotFound
from teacher_ratings.ids import parse_entity_id
from teacher_ratings.observability.logging import get_logger
from teacher_ratings.services.moderation import clean_teacher_name
from teacher_ratings.services.pagination import Pagination, paginate, parse_page

log = get_logger(__name__)


class TeacherDirectory:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._teachers = TeacherRepo(session)
        self._ratings = RatingRepo(session)

    async def list_public(
        self, *, search: str | None = None, page: Any = None, limit: Any = None
    ) -> tuple[list[Teacher], Pagination]:
        req = parse_page(page, limit, default_limit=20)
        term = search.strip() if search else None
        total = await self._teachers.count_active(search=term)
        items = await self._teachers.list_active(search=term, offset=req.offset, limit=req.limit)
        return items, paginate(req, total)

    async def get(self, teacher_id: Any) -> Teacher:
        teacher = await self._teachers.get(parse_entity_id(teacher_id))
        if teacher is None:
            raise NotFound("Teacher not found")
        return teacher

    async def list_all(self, *, actor: Claims | None) -> list[Teacher]:
        require(actor, AccessRule.admin_only)
        return await self._teachers.list_all()

    async def create(
        self, *, actor: Claims | None, name: Any, description: Any = None
    ) -> Teacher:
        require(actor, AccessRule.admin_only)

        clean = clean_teacher_name(name)
        if await self._teachers.get_by_name(clean) is not None:
            raise DuplicateName()
        try:
            teacher = await self._teachers.create(
                name=clean,
                description=description if isinstance(description, str) else "",
                is_active=True,
            )
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateName() from e
        except Exception:
            await self._session.rollback()
            raise

        log.info("teacher_created", teacher_id=str(teacher.id))
        return teacher

    async def set_active(self, *, actor: Claims | None, teacher_id: Any, active: bool) -> Teacher:
        require(actor, AccessRule.admin_only)

        tid = parse_entity_id(teacher_id)
        try:
            teacher = await self._teachers.set_active(tid, active)
            if teacher is None:
                raise NotFound("教师不存在")
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info("teacher_activity_changed", teacher_id=str(tid), is_active=active)
        return teacher

    async def delete(self, *, actor: Claims | None, teacher_id: Any) -> int:
        """
        Delete a teacher and every rating that references it.

        Both steps run in one transaction: ratings first, then the teacher. If the teacher
        is already gone the whole thing rolls back and no rating is touched.
        """

        require(actor, AccessRule.admin_only)

        tid = parse_entity_id(teacher_id)
        try:
            removed = await self._ratings.delete_for_teacher(tid)
            if not await self._teachers.delete(tid):
                raise NotFound("教师不存在")
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info("teacher_deleted", teacher_id=str(tid), ratings_removed=removed)
        return removed
