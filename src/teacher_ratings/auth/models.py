"""
teacher_ratings.auth.models

Auth domain models.

Responsibilities:
- Define the closed role set (`Role`).
- Define the verified identity (`Claims`) injected into endpoints and services.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime


class Role(enum.StrEnum):
    user = "user"
    admin = "admin"


@dataclass(frozen=True, slots=True)
class Claims:
    """
    Identity fields taken from a token whose signature and expiry were verified.
    """

    subject: uuid.UUID
    username: str
    email: str
    role: Role
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin


# --- Module Notes -----------------------------------------------------------
# Claims are rebuilt per request and never persisted.
