"""
routeguard.api.strategies

Builds the service's strategy registry from settings.

Responsibilities:
- Register the Basic strategy (`login-basic`) and the cookie strategy (`login-cookie`).
- Mark the configured default strategy.
"""

from __future__ import annotations

from datetime import timedelta

from routeguard.auth.registry import AuthRegistry
from routeguard.auth.store import CredentialStore
from routeguard.auth.strategy import basic_strategy, cookie_strategy
from routeguard.auth.validators import store_basic_validator, store_session_validator
from routeguard.settings import Settings

BASIC_STRATEGY = "login-basic"
COOKIE_STRATEGY = "login-cookie"


def build_registry(*, settings: Settings, store: CredentialStore) -> AuthRegistry:
    registry = AuthRegistry()
    registry.register(
        basic_strategy(
            BASIC_STRATEGY,
            validator=store_basic_validator(store),
            realm=settings.basic_realm,
        )
    )
    ttl = (
        timedelta(seconds=settings.session_ttl_seconds)
        if settings.session_ttl_seconds is not None
        else None
    )
    registry.register(
        cookie_strategy(
            COOKIE_STRATEGY,
            secret=settings.session_secret,
            validator=store_session_validator(store),
            cookie_name=settings.session_cookie_name,
            secure=settings.session_cookie_secure,
            redirect_to=settings.login_redirect,
            ttl=ttl,
            append_next=settings.append_next,
            alg=settings.session_alg,
        )
    )
    if settings.default_strategy:
        # Unknown names surface as UnknownStrategyName during app construction.
        registry.set_default(settings.default_strategy)
    return registry
