"""
teacher_ratings.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings (prefix `TR_`) for every layer.
- Hide secrets (JWT secret, bootstrap admin password) from repr/logging.
- Offer a cached settings instance for entrypoints that run outside the app.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TR_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "teacher-ratings"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 5000

    # Auth. No default secret: an empty one stops the app at startup.
    jwt_alg: str = "HS256"
    jwt_issuer: str = "teacher-ratings"
    jwt_audience: str = "teacher-ratings-api"
    jwt_secret: str = Field(default="", repr=False)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./teacher_ratings.db"

    # HTTP
    allowed_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Optional bootstrap admin, created on startup when all three are set.
    admin_username: str | None = None
    admin_email: str | None = None
    admin_password: str | None = Field(default=None, repr=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read the Settings stored on app.state by `create_app`, not this cache,
# so tests can build apps with explicit settings side by side.
