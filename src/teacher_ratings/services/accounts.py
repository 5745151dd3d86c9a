"""
teacher_ratings.services.accounts

Account service: registration, login (token issuance), profile, admin user management.

Responsibilities:
- Validate and create accounts with bcrypt password hashes.
- Check credentials and ban status before asking IdentityService for a token.
- Let users edit their own profile and admins ban/unban users.
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_ratings.auth.jwt import IdentityService
from teacher_ratings.auth.models import Claims
from teacher_ratings.auth.passwords import hash_password, verify_password
from teacher_ratings.auth.policy import AccessRule, require, require_identity
from teacher_ratings.db.models import User
from teacher_ratings.db.repositories.users import UserRepo
from teacher_ratings.errors import (
    DuplicateAccount,
    InvalidInput,
    NotFound,
    Unauthenticated,
)
from teacher_ratings.ids import parse_entity_id
from teacher_ratings.observability.logging import get_logger

log = get_logger(__name__)

USERNAME_RE = re.compile(r"^[a-zA-Z0-9]{3,30}$")
REGISTER_PASSWORD_LEN = (6, 30)
# bcrypt only looks at the first 72 bytes; longer secrets are refused outright.
PROFILE_PASSWORD_LEN = (6, 72)
PASSWORD_MAX_BYTES = 72
PROFILE_NAME_MAX = 50

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


def _is_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or len(value) == 0


def _check_password(password: str, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= len(password) <= high:
        raise InvalidInput(f"Password must be between {low} and {high} characters")
    # Multi-byte characters can pass the length check and still overflow bcrypt.
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise InvalidInput("Password is too long")


class AccountService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        identity: IdentityService,
        bcrypt_rounds: int = 12,
    ) -> None:
        self._session = session
        self._identity = identity
        self._rounds = bcrypt_rounds
        self._users = UserRepo(session)

    async def register(self, *, username: Any, email: Any, password: Any) -> User:
        if _blank(email):
            raise InvalidInput("Email address is required")
        if _blank(username):
            raise InvalidInput("Username is required")
        if _blank(password):
            raise InvalidInput("Password is required")
        email, username = email.strip(), username.strip()
        if not _is_email(email):
            raise InvalidInput("Invalid email address")
        if not USERNAME_RE.fullmatch(username):
            raise InvalidInput("Invalid username")
        _check_password(password, REGISTER_PASSWORD_LEN)

        if await self._users.get_by_email(email) is not None:
            raise DuplicateAccount("User with this email already exists.")
        if await self._users.get_by_username(username) is not None:
            raise DuplicateAccount("User with this username already exists.")

        # bcrypt is CPU-bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(hash_password, password, rounds=self._rounds)
        try:
            user = await self._users.create(
                username=username, email=email, password_hash=password_hash
            )
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateAccount() from e
        except Exception:
            await self._session.rollback()
            raise

        log.info("user_registered", user_id=str(user.id))
        return user

    async def login(
        self, *, username: Any = None, email: Any = None, password: Any = None
    ) -> tuple[str, User]:
        if not _blank(email):
            user = await self._users.get_by_email(email.strip())
        elif not _blank(username):
            user = await self._users.get_by_username(username.strip())
        else:
            raise Unauthenticated("Please input your username or email")

        if user is None:
            raise Unauthenticated("The user does not exist")

        candidate = password if isinstance(password, str) else ""
        if not await asyncio.to_thread(verify_password, candidate, user.password_hash):
            log.info("login_failed", user_id=str(user.id), reason="password")
            raise Unauthenticated("The password is wrong")

        if not user.is_active:
            log.info("login_failed", user_id=str(user.id), reason="banned")
            raise Unauthenticated("This user was banned by admin")

        token = self._identity.issue(
            subject=user.id, username=user.username, email=user.email, role=user.role
        )
        log.info("login_succeeded", user_id=str(user.id))
        return token, user

    async def profile(self, *, actor: Claims | None) -> User:
        claims = require_identity(actor)
        user = await self._users.get(claims.subject)
        if user is None:
            raise NotFound("User not found")
        return user

    async def update_profile(
        self,
        *,
        actor: Claims | None,
        email: Any = None,
        password: Any = None,
        profile: dict[str, Any] | None = None,
    ) -> User:
        user = await self.profile(actor=actor)

        if isinstance(email, str) and email.strip() and email.strip() != user.email:
            new_email = email.strip()
            if not _is_email(new_email):
                raise InvalidInput("Invalid email address")
            if await self._users.get_by_email(new_email) is not None:
                raise DuplicateAccount("Email already in use")
            user.email = new_email

        if isinstance(password, str) and password:
            _check_password(password, PROFILE_PASSWORD_LEN)
            user.password_hash = await asyncio.to_thread(
                hash_password, password, rounds=self._rounds
            )

        if profile:
            for key, attr in (("firstName", "first_name"), ("lastName", "last_name")):
                if key not in profile or profile[key] is None:
                    continue
                value = profile[key]
                if not isinstance(value, str) or len(value) > PROFILE_NAME_MAX:
                    raise InvalidInput(f"Invalid {key}")
                setattr(user, attr, value.strip())

        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateAccount("Email already in use") from e
        except Exception:
            await self._session.rollback()
            raise

        log.info("profile_updated", user_id=str(user.id))
        return user

    async def list_users(self, *, actor: Claims | None) -> list[User]:
        require(actor, AccessRule.admin_only)
        return await self._users.list_all()

    async def toggle_active(self, *, actor: Claims | None, user_id: Any) -> User:
        require(actor, AccessRule.admin_only)

        uid = parse_entity_id(user_id)
        try:
            user = await self._users.toggle_active(uid)
            if user is None:
                raise NotFound("用户不存在")
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info("user_status_toggled", user_id=str(uid), is_active=user.is_active)
        return user


# --- Module Notes -----------------------------------------------------------
# Banning only blocks new logins. Tokens issued before the ban stay valid until they
# expire because IdentityService.verify never consults the users table.
