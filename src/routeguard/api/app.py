"""
routeguard.api.app

FastAPI app factory.

Responsibilities:
- Build the credential store and strategy registry from settings.
- Register routers and middleware.
- Validate every route's auth descriptor before the app can serve anything.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from routeguard import __version__
from routeguard.api.routers.basic import router as basic_router
from routeguard.api.routers.health import router as health_router
from routeguard.api.routers.session import router as session_router
from routeguard.api.routing import install_auth
from routeguard.api.strategies import build_registry
from routeguard.auth.registry import AuthRegistry
from routeguard.auth.store import CredentialStore, InMemoryCredentialStore
from routeguard.observability.logging import configure_logging, get_logger
from routeguard.observability.middleware import RequestContextMiddleware
from routeguard.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    store: CredentialStore | None = None,
    registry: AuthRegistry | None = None,
) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.json_logs,
    )

    if store is None:
        store = InMemoryCredentialStore.from_config(settings.users)
    if registry is None:
        registry = build_registry(settings=settings, store=store)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, strategies=registry.names())
        yield
        log.info("shutdown")

    app = FastAPI(
        title="routeguard",
        version=__version__,
        docs_url="/docs" if settings.env != "prod" else None,
        openapi_url="/openapi.json" if settings.env != "prod" else None,
        lifespan=lifespan,
    )
    app.state.credential_store = store

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(session_router)
    app.include_router(basic_router)

    # Fatal on misconfiguration (unknown strategy / missing default).
    install_auth(app, registry)
    return app


# --- Module Notes -----------------------------------------------------------
# Tests pass their own `store` / `registry`; production builds both from settings.
