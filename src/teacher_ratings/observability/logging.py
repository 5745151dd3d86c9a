"""
teacher_ratings.observability.logging

structlog setup for the service.

Responsibilities:
- Render one JSON object per event on stdout (UTC timestamps, level, logger, service).
- Drop credentials and free text (passwords, tokens, rating comments) before rendering.
- Keep library loggers (uvicorn access, SQLAlchemy engine) from duplicating our own lines.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Event keys that never reach the log sink.
REDACTED_KEYS = frozenset(
    {"password", "password_hash", "jwt", "token", "authorization", "comment", "jwt_secret"}
)


def configure_logging(*, service_name: str, level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # RequestContextMiddleware writes the access line; SQL echo is opt-in via TR_LOG_LEVEL=DEBUG.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_level <= logging.DEBUG else logging.WARNING
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            _redact,
            structlog.processors.dict_tracebacks,
            # Names of teachers and moderation notes are mostly Chinese.
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def _redact(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
