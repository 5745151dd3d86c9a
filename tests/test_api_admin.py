"""
tests.test_api_admin

`/api/admin` and `/api/submissions` over HTTP: moderation end to end.
"""

from __future__ import annotations

import uuid

import httpx
import pytest

from teacher_ratings.auth.models import Role

COMMENT = "Patient and well prepared for every class."


@pytest.mark.asyncio
async def test_submission_review_flow(client: httpx.AsyncClient, make_user, auth_header) -> None:
    alice = await make_user("alice")
    admin = await make_user("root", role=Role.admin)

    r = await client.post(
        "/api/submissions", headers=auth_header(alice), json={"name": "周老师", "description": "化学"}
    )
    assert r.status_code == 201
    assert r.json()["message"] == "投稿成功，等待审核"
    sid = r.json()["data"]["id"]
    assert r.json()["data"]["status"] == "pending"

    r = await client.get("/api/admin/submissions", headers=auth_header(admin))
    assert [s["id"] for s in r.json()["data"]] == [sid]

    r = await client.post(f"/api/admin/submissions/{sid}/approve", headers=auth_header(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "投稿已通过，教师已添加"
    assert body["data"]["submission"]["status"] == "approved"
    assert body["data"]["teacher"]["name"] == "周老师"
    assert body["data"]["teacher"]["isActive"] is True

    r = await client.post(
        f"/api/admin/submissions/{sid}/reject",
        headers=auth_header(admin),
        json={"adminNote": "too late"},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "该投稿已处理"

    r = await client.get("/api/teachers", params={"search": "周"})
    assert [t["name"] for t in r.json()["data"]] == ["周老师"]

    r = await client.get("/api/submissions/my", headers=auth_header(alice))
    assert r.json()["data"][0]["status"] == "approved"


@pytest.mark.asyncio
async def test_reject_with_note(client: httpx.AsyncClient, make_user, auth_header) -> None:
    alice = await make_user("alice")
    admin = await make_user("root", role=Role.admin)
    r = await client.post("/api/submissions", headers=auth_header(alice), json={"name": "吴老师"})
    sid = r.json()["data"]["id"]

    r = await client.post(
        f"/api/admin/submissions/{sid}/reject",
        headers=auth_header(admin),
        json={"adminNote": "信息不全"},
    )
    assert r.status_code == 200
    assert r.json()["message"] == "投稿已拒绝"
    assert r.json()["data"]["adminNote"] == "信息不全"

    r = await client.get("/api/admin/submissions", headers=auth_header(admin))
    assert r.json()["data"] == []


@pytest.mark.asyncio
async def test_submission_name_rules(client: httpx.AsyncClient, make_user, make_teacher, auth_header) -> None:
    alice = await make_user("alice")
    await make_teacher("郑老师")

    r = await client.post("/api/submissions", headers=auth_header(alice), json={"name": ""})
    assert r.status_code == 400
    assert r.json()["message"] == "教师姓名必填"

    r = await client.post("/api/submissions", headers=auth_header(alice), json={"name": "郑老师"})
    assert r.status_code == 400
    assert r.json()["message"] == "该教师已在系统中"


@pytest.mark.asyncio
async def test_teacher_catalogue_management(
    client: httpx.AsyncClient, make_user, make_teacher, auth_header
) -> None:
    admin = await make_user("root", role=Role.admin)
    alice = await make_user("alice")
    h = auth_header(admin)

    r = await client.post("/api/admin/teachers", headers=h, json={"name": "孙老师"})
    assert r.status_code == 201
    assert r.json()["message"] == "教师创建成功"
    tid = r.json()["data"]["id"]

    r = await client.post(f"/api/admin/teachers/{tid}/deactivate", headers=h)
    assert r.status_code == 200
    assert r.json()["data"]["isActive"] is False
    assert (await client.get("/api/teachers")).json()["data"] == []

    r = await client.post(f"/api/admin/teachers/{tid}/approve", headers=h)
    assert r.json()["message"] == "教师审核通过"
    assert r.json()["data"]["isActive"] is True

    r = await client.post(
        "/api/ratings",
        headers=auth_header(alice),
        json={"teacherId": tid, "rating": 4, "comment": COMMENT},
    )
    assert r.status_code == 201

    r = await client.get("/api/admin/teachers", headers=h)
    assert r.json()["data"][0]["ratingSum"] == 4

    r = await client.delete(f"/api/admin/teachers/{tid}", headers=h)
    assert r.status_code == 200
    assert r.json()["message"] == "教师已删除"
    assert r.json()["data"] == {"removedRatings": 1}

    assert (await client.get(f"/api/teachers/{tid}")).status_code == 404
    assert (await client.get("/api/admin/ratings", headers=h)).json()["data"] == []
    assert (await client.delete(f"/api/admin/teachers/{tid}", headers=h)).status_code == 404

    r = await client.post("/api/teachers", headers=h, json={"name": "孙老师"})
    assert r.status_code == 201
    assert r.json()["message"] == "Teacher created successfully"


@pytest.mark.asyncio
async def test_rating_moderation(client: httpx.AsyncClient, make_user, make_teacher, auth_header) -> None:
    admin = await make_user("root", role=Role.admin)
    alice = await make_user("alice")
    teacher = await make_teacher()

    r = await client.post(
        "/api/ratings",
        headers=auth_header(alice),
        json={"teacherId": str(teacher.id), "rating": 2, "comment": COMMENT},
    )
    rid = r.json()["data"]["id"]

    r = await client.get("/api/admin/ratings", headers=auth_header(admin))
    assert [x["id"] for x in r.json()["data"]] == [rid]

    r = await client.delete(f"/api/admin/ratings/{rid}", headers=auth_header(admin))
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "评价已删除"}

    data = (await client.get(f"/api/teachers/{teacher.id}")).json()["data"]
    assert (data["rating"], data["ratingCount"]) == (0.0, 0)

    r = await client.delete(f"/api/admin/ratings/{rid}", headers=auth_header(admin))
    assert r.status_code == 404
    r = await client.delete("/api/admin/ratings/xyz", headers=auth_header(admin))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_user_ban_blocks_login(client: httpx.AsyncClient, make_user, auth_header) -> None:
    admin = await make_user("root", role=Role.admin)
    alice = await make_user("alice")

    r = await client.get("/api/admin/users", headers=auth_header(admin))
    assert {u["username"] for u in r.json()["data"]} == {"root", "alice"}

    r = await client.post(f"/api/admin/users/{alice.id}/toggle", headers=auth_header(admin))
    assert r.json()["message"] == "用户已封禁"
    assert r.json()["data"]["isActive"] is False

    r = await client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
    assert r.status_code == 401
    assert r.json()["message"] == "This user was banned by admin"

    r = await client.post(f"/api/admin/users/{alice.id}/toggle", headers=auth_header(admin))
    assert r.json()["message"] == "用户已启用"

    r = await client.post(f"/api/admin/users/{uuid.uuid4()}/toggle", headers=auth_header(admin))
    assert r.status_code == 404
