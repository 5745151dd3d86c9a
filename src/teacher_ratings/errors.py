"""
teacher_ratings.errors

Domain error taxonomy.

Responsibilities:
- Give every failure a class, an HTTP status and a stable caller-facing message.
- Keep services free of FastAPI imports; the API layer renders these as the JSON envelope.

Several business-rule violations answer 401 instead of 409; that status is part of the
public contract and is kept as-is.
"""

from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    message: str = "Something went wrong!"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or type(self).message
        super().__init__(self.message)


# --- 400: malformed or out-of-range input ------------------------------------


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class InvalidInput(ValidationError):
    pass


class InvalidReference(ValidationError):
    message = "Invalid id format"


class InvalidName(ValidationError):
    message = "教师姓名必填"


# --- 401 / 403: identity and role ---------------------------------------------


class Unauthenticated(AppError):
    status_code = 401
    message = "No token, authorization denied"


class InvalidToken(Unauthenticated):
    message = "Token is invalid, please try to login again"


class Forbidden(AppError):
    status_code = 403
    message = "The user is not an admin"


# --- 404 -----------------------------------------------------------------------


class NotFound(AppError):
    status_code = 404
    message = "Not found"


# --- business rules --------------------------------------------------------------


class BusinessRuleViolation(AppError):
    status_code = 400
    message = "Request violates a business rule"


class Inactive(BusinessRuleViolation):
    status_code = 403
    message = "The rating for this teacher is not allowed"


class InvalidScore(BusinessRuleViolation):
    status_code = 401
    message = "The rating must be a number from 1 to 5"


class DuplicateRating(BusinessRuleViolation):
    status_code = 401
    message = "The user had already rated this teacher"


class CommentTooShort(BusinessRuleViolation):
    status_code = 401
    message = "The comment is too short"


class CommentTooLong(BusinessRuleViolation):
    status_code = 401
    message = "The comment is too long"


class DuplicateName(BusinessRuleViolation):
    message = "该教师已在系统中"


class AlreadyProcessed(BusinessRuleViolation):
    message = "该投稿已处理"


class DuplicateAccount(BusinessRuleViolation):
    message = "User already exists."


# --- 500 -------------------------------------------------------------------------


class ServerFault(AppError):
    status_code = 500
    message = "Something went wrong!"


class ServerMisconfigured(ServerFault):
    message = "Server error during authentication"


# --- Module Notes -----------------------------------------------------------
# `InvalidToken` subclasses `Unauthenticated`: a bad signature is a 401, never a 403.
