from __future__ import annotations

import uuid
from typing import Any

from teacher_ratings.errors import InvalidReference


def parse_entity_id(raw: Any, field: str = "id") -> uuid.UUID:
    """
    Parse an entity reference from request input; anything but a UUID is rejected.
    """

    if isinstance(raw, uuid.UUID):
        return raw
    if not isinstance(raw, str) or not raw:
        raise InvalidReference(f"Invalid {field} format")
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        raise InvalidReference(f"Invalid {field} format") from e
