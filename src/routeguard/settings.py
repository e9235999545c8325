"""
routeguard.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the service and its strategies.
- Hide secrets from repr/logging (session secret, user passwords).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PrincipalSettings(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(repr=False)
    id: int
    display_name: str = ""


def _dev_users() -> list[PrincipalSettings]:
    return [
        PrincipalSettings(username="jmenon", password="1234", id=1, display_name="Jayant Menon"),
        PrincipalSettings(username="suraj", password="1234", id=2, display_name="Suraj Nanavare"),
    ]


class Settings(BaseSettings):
    """
    Env-driven, with defaults safe for local dev only. Override at least
    `ROUTEGUARD_SESSION_SECRET` and `ROUTEGUARD_USERS` anywhere else.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROUTEGUARD_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "routeguard"
    log_level: str = "INFO"
    json_logs: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Basic strategy
    basic_realm: str = "routeguard"

    # Cookie strategy
    session_cookie_name: str = "session"
    session_secret: str = Field(
        default="dev-session-secret-change-me-0123456789", min_length=32, repr=False
    )
    session_alg: str = "HS256"
    # Plain-HTTP dev servers cannot receive Secure cookies; turn on behind TLS.
    session_cookie_secure: bool = False
    session_ttl_seconds: int | None = Field(default=None, ge=1)
    login_redirect: str = "/"
    append_next: bool = False

    # Strategy applied to routes that declare no auth; None disables the default.
    default_strategy: str | None = "login-cookie"

    users: list[PrincipalSettings] = Field(default_factory=_dev_users)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `users` is read from JSON, e.g.
# ROUTEGUARD_USERS='[{"username": "alice", "password": "...", "id": 1}]'
