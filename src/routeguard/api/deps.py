"""
routeguard.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for the registry, the credential store and strategies.
- Expose the per-request `AuthContext` set by `AuthRoute`.
"""

from __future__ import annotations

from fastapi import Request

from routeguard.api.strategies import COOKIE_STRATEGY
from routeguard.auth.models import AuthContext
from routeguard.auth.registry import AuthRegistry
from routeguard.auth.store import CredentialStore
from routeguard.auth.strategy import Strategy


def registry_dep(request: Request) -> AuthRegistry:
    # Installed by `routeguard.api.routing.install_auth`.
    return request.app.state.auth_registry  # type: ignore[attr-defined]


def store_dep(request: Request) -> CredentialStore:
    return request.app.state.credential_store  # type: ignore[attr-defined]


def cookie_strategy_dep(request: Request) -> Strategy:
    return registry_dep(request).resolve(COOKIE_STRATEGY)


def get_auth(request: Request) -> AuthContext:
    # Routes with auth disabled (or no AuthRoute at all) see an empty context.
    return getattr(request.state, "auth", None) or AuthContext()


# --- Module Notes -----------------------------------------------------------
# Handlers branch on `get_auth(...).is_authenticated` for try-mode routes.
