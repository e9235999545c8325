"""
tests.test_smoke

End-to-end checks of the FastAPI integration, in-process via httpx.ASGITransport.

Responsibilities:
- Exercise Basic, cookie-session and try-mode routes through the real app.
- Ensure misconfigured routes stop the app from being built.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import APIRouter, FastAPI

from helpers import set_cookies, tamper
from routeguard.api.app import create_app
from routeguard.api.routing import AuthRoute, auth, install_auth, iter_auth_routes
from routeguard.auth.errors import NoDefaultStrategyConfigured, UnknownStrategyName
from routeguard.auth.registry import AuthRegistry
from routeguard.auth.strategy import Strategy
from routeguard.settings import Settings

USERS = [
    {"username": "alice", "password": "secret", "id": 1, "display_name": "Alice Liddell"},
]


def _settings(**overrides) -> Settings:
    return Settings(env="test", json_logs=False, users=USERS, **overrides)


def _client(app: FastAPI) -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


async def _login(client: httpx.AsyncClient) -> str:
    r = await client.post("/login", json={"username": "alice", "password": "secret"})
    assert r.status_code == 303
    assert r.headers["location"] == "/welcome"
    value, raw = set_cookies(r)["session"]
    assert "httponly" in raw.lower()
    return value


@pytest.mark.asyncio
async def test_health_is_public() -> None:
    async with _client(create_app(settings=_settings())) as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_basic_route() -> None:
    async with _client(create_app(settings=_settings())) as client:
        r = await client.get("/basic/login")
        assert r.status_code == 401
        assert r.headers["www-authenticate"] == 'Basic realm="routeguard"'

        r = await client.get("/basic/login", auth=("alice", "wrong"))
        assert r.status_code == 401

        r = await client.get("/basic/login", auth=("alice", "secret"))
        assert r.status_code == 200
        assert r.json()["user"] == {"id": 1, "username": "alice", "name": "Alice Liddell"}


@pytest.mark.asyncio
async def test_default_strategy_redirects_anonymous_callers() -> None:
    async with _client(create_app(settings=_settings())) as client:
        r = await client.get("/welcome")
        assert r.status_code == 302
        assert r.headers["location"] == "/"
        assert "session" not in set_cookies(r)


@pytest.mark.asyncio
async def test_login_then_welcome() -> None:
    async with _client(create_app(settings=_settings())) as client:
        session = await _login(client)

    async with _client(create_app(settings=_settings())) as client:
        r = await client.get("/welcome", headers={"cookie": f"session={session}"})
        assert r.status_code == 200
        assert r.json() == {"message": "Welcome alice", "strategy": "login-cookie"}

        r = await client.get("/", headers={"cookie": f"session={session}"})
        assert r.json()["authenticated"] is True


@pytest.mark.asyncio
async def test_failed_login_issues_nothing() -> None:
    async with _client(create_app(settings=_settings())) as client:
        r = await client.post("/login", json={"username": "alice", "password": "nope"})
        assert r.status_code == 303
        assert r.headers["location"] == "/"
        assert "session" not in set_cookies(r)


@pytest.mark.asyncio
async def test_tampered_session() -> None:
    app = create_app(settings=_settings())
    async with _client(app) as client:
        bad = tamper(await _login(client))

    async with _client(app) as client:
        r = await client.get("/welcome", headers={"cookie": f"session={bad}"})
        assert r.status_code == 302
        assert "max-age=0" in set_cookies(r)["session"][1].lower()

        # Try mode: no redirect, anonymous view, stale cookie still cleared.
        r = await client.get("/", headers={"cookie": f"session={bad}"})
        assert r.status_code == 200
        assert r.json()["authenticated"] is False
        assert "max-age=0" in set_cookies(r)["session"][1].lower()


@pytest.mark.asyncio
async def test_logout_clears_cookie() -> None:
    async with _client(create_app(settings=_settings())) as client:
        r = await client.post("/logout")
        assert r.status_code == 303
        assert "max-age=0" in set_cookies(r)["session"][1].lower()


@pytest.mark.asyncio
async def test_without_default_undeclared_routes_are_public() -> None:
    async with _client(create_app(settings=_settings(default_strategy=None))) as client:
        r = await client.get("/welcome")
        assert r.status_code == 200
        assert r.json()["message"] == "Welcome stranger"


def test_unknown_default_strategy_is_fatal() -> None:
    with pytest.raises(UnknownStrategyName):
        create_app(settings=_settings(default_strategy="nope"))


def _app_with(route_auth, registry: AuthRegistry) -> FastAPI:
    router = APIRouter(route_class=AuthRoute)

    @router.get("/x")
    @auth(route_auth)
    async def x() -> dict[str, str]:
        return {"ok": "yes"}

    app = FastAPI()
    app.include_router(router)
    install_auth(app, registry)
    return app


def test_route_with_unknown_strategy_is_fatal(basic: Strategy) -> None:
    registry = AuthRegistry()
    registry.register(basic)
    with pytest.raises(UnknownStrategyName):
        _app_with("login-cookie", registry)


def test_route_demanding_missing_default_is_fatal(basic: Strategy) -> None:
    registry = AuthRegistry()
    registry.register(basic)
    with pytest.raises(NoDefaultStrategyConfigured):
        _app_with({"mode": "try"}, registry)


@pytest.mark.asyncio
async def test_standalone_router_enforces_decision(basic: Strategy) -> None:
    registry = AuthRegistry()
    registry.register(basic)
    async with _client(_app_with("login-basic", registry)) as client:
        assert (await client.get("/x")).status_code == 401
        r = await client.get("/x", auth=("alice", "secret"))
        assert r.status_code == 200


@pytest.mark.asyncio
async def test_non_ascii_basic_header_is_unauthorized() -> None:
    async with _client(create_app(settings=_settings())) as client:
        r = await client.get("/basic/login", headers={"Authorization": b"Basic \xe9\xe9\xe9\xe9"})
        assert r.status_code == 401
        assert r.headers["www-authenticate"] == 'Basic realm="routeguard"'


def test_install_auth_sees_every_included_route() -> None:
    app = create_app(settings=_settings())
    names = {route.name for route in iter_auth_routes(app.routes)}
    assert names == {"healthz", "home", "login", "logout", "welcome", "basic_login"}


def test_nested_router_with_unknown_strategy_is_fatal(basic: Strategy) -> None:
    inner = APIRouter(route_class=AuthRoute)

    @inner.get("/y")
    @auth("login-cookie")
    async def y() -> dict[str, str]:
        return {"ok": "yes"}

    outer = APIRouter(prefix="/outer")
    outer.include_router(inner)
    app = FastAPI()
    app.include_router(outer)

    registry = AuthRegistry()
    registry.register(basic)
    with pytest.raises(UnknownStrategyName):
        install_auth(app, registry)


@pytest.mark.asyncio
async def test_strategy_removed_after_startup_denies(basic: Strategy) -> None:
    registry = AuthRegistry()
    registry.register(basic)
    app = _app_with("login-basic", registry)
    registry.unregister("login-basic")

    async with _client(app) as client:
        r = await client.get("/x", auth=("alice", "secret"))
        assert r.status_code == 401
        assert "www-authenticate" not in r.headers
