"""
teacher_ratings.auth.policy

Access rules (AccessPolicy).

Responsibilities:
- Decide whether an operation may proceed for a (possibly absent) verified identity.
- Keep "who are you" (401) and "you may not" (403) as separate outcomes.
"""

from __future__ import annotations

import enum
from typing import assert_never

from teacher_ratings.auth.models import Claims, Role
from teacher_ratings.errors import Forbidden, Unauthenticated


class AccessRule(enum.Enum):
    public = "public"
    authenticated = "authenticated"
    admin_only = "admin_only"


def require(claims: Claims | None, rule: AccessRule) -> Claims | None:
    if rule is AccessRule.public:
        return claims
    if claims is None:
        raise Unauthenticated()
    if rule is AccessRule.authenticated:
        return claims
    if rule is AccessRule.admin_only:
        if claims.role is not Role.admin:
            raise Forbidden()
        return claims
    assert_never(rule)


def require_identity(claims: Claims | None, rule: AccessRule = AccessRule.authenticated) -> Claims:
    """Like `require`, but for rules that always yield an identity."""
    checked = require(claims, rule)
    if checked is None:
        raise Unauthenticated()
    return checked


# --- Module Notes -----------------------------------------------------------
# The FastAPI side (`auth.deps.require_rule`) turns bearer headers into `Claims`
# and hands them to `require`.
