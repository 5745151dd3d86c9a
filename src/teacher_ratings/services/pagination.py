from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

MAX_LIMIT = 100


@dataclass(frozen=True, slots=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _to_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    # Zero falls back to the default, like an absent parameter.
    return value or default


def parse_page(
    page: Any = None,
    limit: Any = None,
    *,
    default_page: int = 1,
    default_limit: int = 20,
) -> PageRequest:
    return PageRequest(
        page=max(1, _to_int(page, default_page)),
        limit=min(MAX_LIMIT, max(1, _to_int(limit, default_limit))),
    )


def paginate(req: PageRequest, total: int) -> Pagination:
    return Pagination(
        page=req.page,
        limit=req.limit,
        total=total,
        pages=math.ceil(total / req.limit),
    )
