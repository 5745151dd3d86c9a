"""
tests.test_teacher_directory

TeacherDirectory: public listing/search/pagination and admin catalogue writes.
"""

from __future__ import annotations

import uuid

import pytest

from teacher_ratings.auth.models import Role
from teacher_ratings.db.repositories.ratings import RatingRepo
from teacher_ratings.errors import DuplicateName, Forbidden, InvalidReference, NotFound
from teacher_ratings.services.pagination import MAX_LIMIT, paginate, parse_page
from teacher_ratings.services.rating_ledger import RatingLedger
from teacher_ratings.services.teacher_directory import TeacherDirectory


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, (1, 20)),
        ("3", "5", (3, 5)),
        ("0", "0", (1, 20)),
        ("-2", "abc", (1, 20)),
        ("1", "1000", (1, MAX_LIMIT)),
    ],
)
def test_parse_page(page, limit, expected) -> None:
    req = parse_page(page, limit)
    assert (req.page, req.limit) == expected


def test_paginate_counts_pages() -> None:
    assert paginate(parse_page(1, 20), 0).pages == 0
    assert paginate(parse_page(1, 20), 20).pages == 1
    assert paginate(parse_page(1, 20), 21).pages == 2


@pytest.mark.asyncio
async def test_public_listing_hides_inactive_and_searches(session_factory, make_teacher) -> None:
    await make_teacher("张三")
    await make_teacher("张四")
    await make_teacher("李五")
    await make_teacher("张六", active=False)

    async with session_factory() as session:
        directory = TeacherDirectory(session=session)
        everyone, pagination = await directory.list_public()
        zhang, zhang_page = await directory.list_public(search="张")

    assert {t.name for t in everyone} == {"张三", "张四", "李五"}
    assert pagination.total == 3
    assert {t.name for t in zhang} == {"张三", "张四"}
    assert zhang_page.total == 2


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(session_factory, make_teacher) -> None:
    await make_teacher("100% Smith")
    await make_teacher("Jones")

    async with session_factory() as session:
        hits, _ = await TeacherDirectory(session=session).list_public(search="%")
    assert [t.name for t in hits] == ["100% Smith"]


@pytest.mark.asyncio
async def test_get_teacher(session_factory, make_teacher) -> None:
    teacher = await make_teacher()
    async with session_factory() as session:
        directory = TeacherDirectory(session=session)
        assert (await directory.get(str(teacher.id))).name == teacher.name
        with pytest.raises(NotFound):
            await directory.get(str(uuid.uuid4()))
        with pytest.raises(InvalidReference):
            await directory.get("123")


@pytest.mark.asyncio
async def test_admin_create_and_duplicate_name(session_factory, make_user, claims_for) -> None:
    admin = claims_for(await make_user("root", role=Role.admin))
    user = claims_for(await make_user("alice"))

    async with session_factory() as session:
        directory = TeacherDirectory(session=session)
        teacher = await directory.create(actor=admin, name=" 赵老师 ", description="物理")
        assert teacher.name == "赵老师"
        assert teacher.is_active
        with pytest.raises(DuplicateName):
            await directory.create(actor=admin, name="赵老师")
        with pytest.raises(Forbidden):
            await directory.create(actor=user, name="钱老师")


@pytest.mark.asyncio
async def test_set_active_toggles_visibility(session_factory, make_user, make_teacher, claims_for) -> None:
    admin = claims_for(await make_user("root", role=Role.admin))
    teacher = await make_teacher(active=False)

    async with session_factory() as session:
        directory = TeacherDirectory(session=session)
        await directory.set_active(actor=admin, teacher_id=str(teacher.id), active=True)
        listed, _ = await directory.list_public()
        assert [t.id for t in listed] == [teacher.id]

        await directory.set_active(actor=admin, teacher_id=str(teacher.id), active=False)
        listed, _ = await directory.list_public()
        assert listed == []

        with pytest.raises(NotFound):
            await directory.set_active(actor=admin, teacher_id=str(uuid.uuid4()), active=True)


@pytest.mark.asyncio
async def test_delete_removes_teacher_and_its_ratings(
    session_factory, make_user, make_teacher, claims_for
) -> None:
    admin = claims_for(await make_user("root", role=Role.admin))
    doomed = await make_teacher("Doomed")
    kept = await make_teacher("Kept")
    alice = claims_for(await make_user("alice"))
    for teacher in (doomed, kept):
        async with session_factory() as session:
            await RatingLedger(session=session).submit(
                actor=alice, teacher_id=str(teacher.id), score=4, comment="A solid lecturer overall."
            )

    async with session_factory() as session:
        removed = await TeacherDirectory(session=session).delete(
            actor=admin, teacher_id=str(doomed.id)
        )
    assert removed == 1

    async with session_factory() as session:
        assert await RatingRepo(session).count_for_teacher(doomed.id) == 0
        assert await RatingRepo(session).count_for_teacher(kept.id) == 1
        with pytest.raises(NotFound):
            await TeacherDirectory(session=session).delete(actor=admin, teacher_id=str(doomed.id))
