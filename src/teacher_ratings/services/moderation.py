"""
teacher_ratings.services.moderation

Moderation workflow for teacher proposals.

Responsibilities:
- Accept proposals from authenticated users as `pending` submissions.
- Apply an admin decision exactly once: pending -> approved | rejected (both terminal).
- On approval, create the active teacher in the same transaction as the transition.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.auth.models import Claims
from teacher_ratings.auth.policy import AccessRule, require, require_identity
from teacher_ratings.db.models import Submission, SubmissionStatus, Teacher
from teacher_ratings.db.repositories.submissions import SubmissionRepo
from teacher_ratings.db.repositories.teachers import TeacherRepo
from teacher_ratings.errors import (
    AlreadyProcessed,
    DuplicateName,
    InvalidInput,
    InvalidName,
    NotFound,
)
from teacher_ratings.ids import parse_entity_id
from teacher_ratings.observability.logging import get_logger

log = get_logger(__name__)

NAME_MAX_LENGTH = 128
SUBMISSION_NOT_FOUND = "投稿不存在"


class Decision(enum.StrEnum):
    approve = "approve"
    reject = "reject"

    @property
    def target(self) -> SubmissionStatus:
        if self is Decision.approve:
            return SubmissionStatus.approved
        return SubmissionStatus.rejected

    @property
    def default_note(self) -> str:
        if self is Decision.approve:
            return "审核通过"
        return "审核拒绝"


@dataclass(frozen=True, slots=True)
class DecisionOutcome:
    submission: Submission
    teacher: Teacher | None


def clean_teacher_name(raw: Any) -> str:
    name = raw.strip() if isinstance(raw, str) else ""
    if not name:
        raise InvalidName()
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidInput("Teacher name is too long")
    return name


class ModerationWorkflow:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._submissions = SubmissionRepo(session)
        self._teachers = TeacherRepo(session)

    async def propose(
        self, *, actor: Claims | None, name: Any, description: Any = None
    ) -> Submission:
        claims = require_identity(actor)

        clean = clean_teacher_name(name)
        # Only existing teachers block a proposal; other pending proposals with the same
        # name are allowed and resolved at decision time.
        if await self._teachers.get_by_name(clean) is not None:
            raise DuplicateName()

        try:
            sub = await self._submissions.create(
                name=clean,
                description=description if isinstance(description, str) else "",
                submitted_by=claims.subject,
            )
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info("submission_created", submission_id=str(sub.id), user_id=str(claims.subject))
        return sub

    async def decide(
        self,
        *,
        actor: Claims | None,
        submission_id: Any,
        decision: Decision,
        note: str | None = None,
    ) -> DecisionOutcome:
        require(actor, AccessRule.admin_only)

        sid = parse_entity_id(submission_id)
        sub = await self._submissions.get(sid)
        if sub is None:
            raise NotFound(SUBMISSION_NOT_FOUND)
        if sub.status.is_terminal:
            raise AlreadyProcessed()

        admin_note = note.strip() if isinstance(note, str) and note.strip() else decision.default_note
        teacher: Teacher | None = None
        try:
            # Compare-and-set on status: of two concurrent deciders only one sees a row change.
            if not await self._submissions.transition(sid, to=decision.target, note=admin_note):
                raise AlreadyProcessed()
            if decision is Decision.approve:
                teacher = await self._teachers.create(
                    name=sub.name,
                    description=sub.description,
                    is_active=True,
                )
            await self._session.commit()
        except IntegrityError as e:
            # A teacher with this name was created after the proposal was filed.
            await self._session.rollback()
            raise DuplicateName() from e
        except Exception:
            await self._session.rollback()
            raise

        decided = await self._submissions.get(sid)
        if decided is None:
            raise NotFound(SUBMISSION_NOT_FOUND)
        log.info(
            "submission_decided",
            submission_id=str(sid),
            status=decided.status.value,
            teacher_id=str(teacher.id) if teacher else None,
        )
        return DecisionOutcome(submission=decided, teacher=teacher)

    async def list_pending(self, *, actor: Claims | None) -> list[Submission]:
        require(actor, AccessRule.admin_only)
        return await self._submissions.list_pending()

    async def list_for_user(self, *, actor: Claims | None) -> list[Submission]:
        claims = require_identity(actor)
        return await self._submissions.list_for_user(claims.subject)


# --- Module Notes -----------------------------------------------------------
# The pre-read of `status` only picks the error message; `SubmissionRepo.transition`
# is what guarantees a submission leaves `pending` once.
