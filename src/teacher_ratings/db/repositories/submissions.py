"""
teacher_ratings.db.repositories.submissions

Repository for `Submission` entities.

Responsibilities:
- Create pending proposals and list them (pending queue, per submitter).
- Move a submission out of `pending` with a compare-and-set UPDATE.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.db.models import Submission, SubmissionStatus


class SubmissionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, name: str, description: str, submitted_by: uuid.UUID
    ) -> Submission:
        sub = Submission(
            name=name,
            description=description,
            submitted_by=submitted_by,
            status=SubmissionStatus.pending,
            admin_note="",
            processed_at=None,
        )
        self._session.add(sub)
        await self._session.flush()
        return sub

    async def get(self, submission_id: uuid.UUID) -> Submission | None:
        return await self._session.get(Submission, submission_id, populate_existing=True)

    async def list_pending(self) -> list[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.status == SubmissionStatus.pending)
            .order_by(desc(Submission.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_for_user(self, user_id: uuid.UUID) -> list[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.submitted_by == user_id)
            .order_by(desc(Submission.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def transition(
        self,
        submission_id: uuid.UUID,
        *,
        to: SubmissionStatus,
        note: str,
    ) -> bool:
        # Succeeds only for the caller that observes `pending`; everyone else gets False.
        stmt = (
            update(Submission)
            .where(
                Submission.id == submission_id,
                Submission.status == SubmissionStatus.pending,
            )
            .values(
                status=to,
                admin_note=note,
                processed_at=datetime.now(UTC).replace(tzinfo=None),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1
