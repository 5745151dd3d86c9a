"""
teacher_ratings.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into verified `Claims`.
- Enforce `AccessRule`s via a reusable dependency factory.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from teacher_ratings.auth.jwt import IdentityService
from teacher_ratings.auth.models import Claims
from teacher_ratings.auth.policy import AccessRule, require, require_identity
from teacher_ratings.errors import InvalidToken
from teacher_ratings.observability.logging import get_logger

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def identity_service(request: Request) -> IdentityService:
    # Built once on app creation in `teacher_ratings.api.app.create_app`.
    return request.app.state.identity  # type: ignore[attr-defined]


def require_rule(rule: AccessRule):
    def _dep(
        creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
        identity: IdentityService = Depends(identity_service),
    ) -> Claims | None:
        if creds is None or not creds.credentials:
            return require(None, rule)

        try:
            claims = identity.verify(creds.credentials)
        except InvalidToken:
            # Public routes serve a stale or forged token as anonymous.
            if rule is AccessRule.public:
                return None
            log.warning("token_rejected")
            raise
        return require(claims, rule)

    return _dep


def get_claims(
    claims: Claims | None = Depends(require_rule(AccessRule.authenticated)),
) -> Claims:
    return require_identity(claims, AccessRule.authenticated)


def get_admin(
    claims: Claims | None = Depends(require_rule(AccessRule.admin_only)),
) -> Claims:
    return require_identity(claims, AccessRule.admin_only)


# --- Module Notes -----------------------------------------------------------
# Routers depend on `get_claims` / `get_admin`; both raise errors from
# `teacher_ratings.errors`, which the app renders as the JSON envelope.
