"""
teamtacles_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, bootstrap admin password).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single settings object injected across layers.
    Every field can be overridden with a `TEAMTACLES_*` environment variable.
    """

    model_config = SettingsConfigDict(env_prefix="TEAMTACLES_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "teamtacles-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "teamtacles-api"
    jwt_audience: str = "teamtacles"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_ttl_minutes: int = Field(default=60, ge=1)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./teamtacles.db"

    # Remote task service (cascade delete target). Timeouts are always explicit.
    task_service_base_url: str = "http://localhost:8081"
    task_service_connect_timeout_seconds: float = Field(default=5.0, gt=0)
    task_service_read_timeout_seconds: float = Field(default=10.0, gt=0)

    # Pagination
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1, le=1000)

    # Optional administrator created at startup when all three are set.
    bootstrap_admin_username: str | None = None
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = Field(default=None, repr=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other module depends on this one; keep field names stable since they
# double as environment variable names.
