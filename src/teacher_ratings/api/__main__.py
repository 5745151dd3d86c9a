"""
teacher_ratings.api.__main__

Entrypoint for `python -m teacher_ratings.api` (also installed as `teacher-ratings`).
"""

from __future__ import annotations

import uvicorn

from teacher_ratings.api.app import create_app
from teacher_ratings.settings import get_settings


def main() -> None:
    settings = get_settings()
    # create_app raises ServerMisconfigured before the port is bound when TR_JWT_SECRET is unset.
    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog owns the handlers
        log_level=settings.log_level.lower(),
        access_log=False,  # RequestContextMiddleware emits `request_finished`
    )


if __name__ == "__main__":
    main()
