"""
teacher_ratings.api.envelope

JSON envelope and entity serializers.

Responsibilities:
- Build `{success, message?, data?, pagination?}` bodies.
- Map ORM entities to the camelCase shapes clients consume.
- Render every error (domain, HTTP, request-shape, unexpected) as the envelope.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from teacher_ratings.db.models import Rating, Submission, Teacher, User
from teacher_ratings.errors import AppError, ServerFault
from teacher_ratings.observability.logging import get_logger
from teacher_ratings.services.pagination import Pagination

log = get_logger(__name__)


def ok(
    data: Any = None,
    *,
    message: str | None = None,
    pagination: Pagination | None = None,
    **extra: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination.as_dict()
    body.update(extra)
    return body


def fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


# --- serializers -------------------------------------------------------------


def user_summary(user: User) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
        "profile": {
            "firstName": user.first_name,
            "lastName": user.last_name,
            "avatarUrl": user.avatar_url,
        },
    }


def user_admin_view(user: User) -> dict[str, Any]:
    return {
        **user_summary(user),
        "isActive": user.is_active,
        "createdAt": user.created_at.isoformat(),
    }


def teacher_public(teacher: Teacher) -> dict[str, Any]:
    return {
        "id": str(teacher.id),
        "name": teacher.name,
        "description": teacher.description,
        "rating": teacher.average_rating,
        "ratingCount": teacher.rating_count,
    }


def teacher_admin_view(teacher: Teacher) -> dict[str, Any]:
    return {
        **teacher_public(teacher),
        "ratingSum": teacher.rating_sum,
        "isActive": teacher.is_active,
        "createdAt": teacher.created_at.isoformat(),
    }


def rating_view(rating: Rating, *, public: bool = False) -> dict[str, Any]:
    return {
        "id": str(rating.id),
        "teacherId": str(rating.teacher_id),
        # Anonymous authors stay hidden on public listings.
        "userId": None if public and rating.is_anonymous else str(rating.user_id),
        "rating": rating.score,
        "comment": rating.comment,
        "isAnonymous": rating.is_anonymous,
        "createdAt": rating.created_at.isoformat(),
    }


def submission_view(sub: Submission) -> dict[str, Any]:
    return {
        "id": str(sub.id),
        "name": sub.name,
        "description": sub.description,
        "submittedBy": str(sub.submitted_by),
        "status": sub.status.value,
        "adminNote": sub.admin_note,
        "processedAt": sub.processed_at.isoformat() if sub.processed_at else None,
        "createdAt": sub.created_at.isoformat(),
    }


# --- error handlers ----------------------------------------------------------


async def _app_error(_: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, ServerFault):
        log.error("server_fault", error_type=type(exc).__name__, exc_info=exc)
    return fail(exc.status_code, exc.message)


async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == HTTP_404_NOT_FOUND:
        return fail(HTTP_404_NOT_FOUND, "Route not found")
    return fail(exc.status_code, str(exc.detail))


async def _request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = " ".join(filter(None, ["Invalid request:", where, first.get("msg")]))
    return fail(HTTP_400_BAD_REQUEST, message)


async def _unexpected_error(_: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)
    return fail(HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong!")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unexpected_error)


# --- Module Notes -----------------------------------------------------------
# ServerFault messages are generic by construction; details only reach the logs.
