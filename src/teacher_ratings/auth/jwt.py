"""
teacher_ratings.auth.jwt

Identity token issuing and verification (IdentityService).

Responsibilities:
- Issue HS256 JWTs carrying subject id, username, email and role, valid for 12 hours.
- Decode and validate tokens with strict claim requirements (iss/aud/exp/iat/sub).
- Refuse to sign or verify anything with an empty secret.

Verification is purely cryptographic and time-bounded: no database lookup happens here,
so a user banned after login keeps a working token until it expires.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from teacher_ratings.auth.models import Claims, Role
from teacher_ratings.errors import InvalidToken, ServerMisconfigured
from teacher_ratings.settings import Settings

TOKEN_TTL = timedelta(hours=12)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


def _require_secret(cfg: JwtConfig) -> None:
    if not cfg.secret or not cfg.secret.strip():
        raise ServerMisconfigured()


def issue_token(
    *,
    cfg: JwtConfig,
    subject: uuid.UUID,
    username: str,
    email: str,
    role: Role,
    ttl: timedelta = TOKEN_TTL,
) -> str:
    _require_secret(cfg)
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": str(subject),
        "username": username,
        "email": email,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    _require_secret(cfg)
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise InvalidToken() from e


def claims_from_payload(payload: dict[str, Any]) -> Claims:
    try:
        return Claims(
            subject=uuid.UUID(str(payload["sub"])),
            username=str(payload.get("username", "")),
            email=str(payload.get("email", "")),
            role=Role(payload.get("role")),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )
    except (KeyError, TypeError, ValueError) as e:
        # Signed by us but not shaped like our tokens (unknown role, non-uuid subject).
        raise InvalidToken() from e


class IdentityService:
    def __init__(self, cfg: JwtConfig, *, ttl: timedelta = TOKEN_TTL) -> None:
        _require_secret(cfg)
        self._cfg = cfg
        self._ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> IdentityService:
        return cls(JwtConfig.from_settings(settings))

    def issue(
        self,
        *,
        subject: uuid.UUID,
        username: str,
        email: str,
        role: Role,
        ttl: timedelta | None = None,
    ) -> str:
        return issue_token(
            cfg=self._cfg,
            subject=subject,
            username=username,
            email=email,
            role=role,
            ttl=self._ttl if ttl is None else ttl,
        )

    def verify(self, token: str) -> Claims:
        return claims_from_payload(decode_and_validate(cfg=self._cfg, token=token))


# --- Module Notes -----------------------------------------------------------
# `create_app` builds one IdentityService at startup, which is where a missing secret
# turns into a startup failure instead of a 500 on the first login.
