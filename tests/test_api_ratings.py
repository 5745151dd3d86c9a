"""
tests.test_api_ratings

Public teacher reads and rating submission over HTTP.
"""

from __future__ import annotations

import uuid

import httpx
import pytest

COMMENT = "Great teacher, very clear explanations."


@pytest.mark.asyncio
async def test_rate_then_read_aggregate(client: httpx.AsyncClient, make_user, make_teacher, auth_header) -> None:
    teacher = await make_teacher()
    alice = await make_user("alice")
    bob = await make_user("bob")

    r = await client.post(
        "/api/ratings",
        headers=auth_header(alice),
        json={"teacherId": str(teacher.id), "rating": 5, "comment": COMMENT},
    )
    assert r.status_code == 201
    assert r.json()["message"] == "Rating submitted successfully"
    assert r.json()["data"]["rating"] == 5

    r = await client.post(
        "/api/ratings",
        headers=auth_header(bob),
        json={"teacherId": str(teacher.id), "rating": 4, "comment": COMMENT, "isAnonymous": True},
    )
    assert r.status_code == 201

    r = await client.get(f"/api/teachers/{teacher.id}")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["rating"] == 4.5
    assert data["ratingCount"] == 2

    r = await client.get(f"/api/teachers/{teacher.id}/ratings")
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}
    by_score = {item["rating"]: item for item in body["data"]}
    assert by_score[4]["userId"] is None
    assert by_score[5]["userId"] == str(alice.id)

    r = await client.get("/api/ratings/my", headers=auth_header(bob))
    assert [item["rating"] for item in r.json()["data"]] == [4]


@pytest.mark.asyncio
async def test_rating_errors(client: httpx.AsyncClient, make_user, make_teacher, auth_header) -> None:
    teacher = await make_teacher()
    hidden = await make_teacher("Hidden", active=False)
    alice = await make_user("alice")
    h = auth_header(alice)

    async def rate(**body):
        return await client.post("/api/ratings", headers=h, json=body)

    r = await rate(teacherId=str(teacher.id), rating=5, comment=COMMENT)
    assert r.status_code == 201

    cases = [
        (dict(teacherId="123", rating=5, comment=COMMENT), 400, "Invalid teacherId format"),
        (dict(teacherId=str(uuid.uuid4()), rating=5, comment=COMMENT), 404, "This teacher does not exists"),
        (dict(teacherId=str(hidden.id), rating=5, comment=COMMENT), 403, "The rating for this teacher is not allowed"),
        (dict(teacherId=str(teacher.id), rating=7, comment=COMMENT), 401, "The rating must be a number from 1 to 5"),
        (dict(teacherId=str(teacher.id), rating=4, comment="short"), 401, "The user had already rated this teacher"),
    ]
    for body, status, message in cases:
        r = await rate(**body)
        assert r.status_code == status, body
        assert r.json() == {"success": False, "message": message}

    r = await client.get(f"/api/teachers/{teacher.id}")
    assert r.json()["data"]["ratingCount"] == 1


@pytest.mark.asyncio
async def test_short_comment_on_fresh_pair(client: httpx.AsyncClient, make_user, make_teacher, auth_header) -> None:
    teacher = await make_teacher()
    alice = await make_user("alice")
    r = await client.post(
        "/api/ratings",
        headers=auth_header(alice),
        json={"teacherId": str(teacher.id), "rating": 3, "comment": "meh"},
    )
    assert r.status_code == 401
    assert r.json()["message"] == "The comment is too short"


@pytest.mark.asyncio
async def test_rating_requires_token(client: httpx.AsyncClient, make_teacher) -> None:
    teacher = await make_teacher()
    r = await client.post(
        "/api/ratings", json={"teacherId": str(teacher.id), "rating": 5, "comment": COMMENT}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_teacher_listing_search_and_pagination(client: httpx.AsyncClient, make_teacher) -> None:
    for i in range(5):
        await make_teacher(f"Teacher {i}")
    await make_teacher("Someone Else")
    await make_teacher("Teacher hidden", active=False)

    r = await client.get("/api/teachers", params={"search": "teacher", "limit": "2", "page": "3"})
    body = r.json()
    assert r.status_code == 200
    assert body["pagination"] == {"page": 3, "limit": 2, "total": 5, "pages": 3}
    assert len(body["data"]) == 1
    assert set(body["data"][0]) == {"id", "name", "description", "rating", "ratingCount"}

    r = await client.get("/api/teachers")
    assert r.json()["pagination"]["total"] == 6


@pytest.mark.asyncio
async def test_teacher_detail_errors(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/teachers/not-an-id")
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid id format"

    r = await client.get(f"/api/teachers/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json()["message"] == "Teacher not found"
