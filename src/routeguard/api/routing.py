"""
routeguard.api.routing

Router-side enforcement of auth decisions.

Responsibilities:
- Let endpoints declare their auth mode (`@auth(...)`).
- Run the decision engine before every `AuthRoute` endpoint and translate the
  decision into a 401, a redirect, or the endpoint's own response.
- Install the registry/engine on an app and validate every route at startup.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine, Iterable, Iterator
from typing import Any, TypeVar

from fastapi import FastAPI
from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.routing import BaseRoute
from starlette.status import HTTP_302_FOUND, HTTP_401_UNAUTHORIZED

from routeguard.api.cookies import clear_session_cookie
from routeguard.auth.engine import AuthDecisionEngine
from routeguard.auth.models import AuthContext, AuthDecision, AuthRequest, Outcome, RouteAuth
from routeguard.auth.registry import AuthRegistry
from routeguard.observability.logging import get_logger

log = get_logger(__name__)

ROUTE_AUTH_ATTR = "__route_auth__"

_F = TypeVar("_F", bound=Callable[..., Any])


def auth(value: Any = None, *, mode: str | None = None, strategy: str | None = None):
    """
    Attach an auth descriptor to an endpoint. Apply it below the router decorator::

        @router.get("/")
        @auth(mode="try")
        async def home(...): ...

    Accepts the `RouteAuth.coerce` shorthands (`False`, `"name"`, a mapping) or
    keyword `mode` / `strategy`.
    """

    if mode is not None or strategy is not None:
        value = {"mode": mode or "required", "strategy": strategy}
    route_auth = RouteAuth.coerce(value)

    def decorator(fn: _F) -> _F:
        setattr(fn, ROUTE_AUTH_ATTR, route_auth)
        return fn

    return decorator


def route_auth_of(endpoint: Callable[..., Any]) -> RouteAuth | None:
    return getattr(endpoint, ROUTE_AUTH_ATTR, None)


def _deny_response(decision: AuthDecision) -> Response:
    headers = {"WWW-Authenticate": decision.challenge} if decision.challenge else None
    return JSONResponse(
        {"detail": "Unauthorized"}, status_code=HTTP_401_UNAUTHORIZED, headers=headers
    )


class AuthRoute(APIRoute):
    @property
    def route_auth(self) -> RouteAuth | None:
        return route_auth_of(self.endpoint)

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        endpoint_handler = super().get_route_handler()
        route_auth = self.route_auth

        async def handler(request: Request) -> Response:
            engine: AuthDecisionEngine = request.app.state.auth_engine
            decision = await engine.decide(AuthRequest.from_starlette(request), route_auth)

            if decision.outcome is Outcome.ALLOW:
                # Visible to this request only; never written back to the registry.
                request.state.auth = AuthContext(
                    credentials=decision.credentials,
                    strategy=decision.strategy,
                    mode=decision.mode,
                )
                response = await endpoint_handler(request)
            elif decision.outcome is Outcome.REDIRECT:
                response = RedirectResponse(
                    decision.redirect_location or "/", status_code=HTTP_302_FOUND
                )
            else:
                response = _deny_response(decision)

            if decision.clear_cookie and decision.strategy:
                strategy = engine.registry.resolve(decision.strategy)
                clear_session_cookie(response, strategy.options)
            return response

        return handler


def iter_auth_routes(routes: Iterable[BaseRoute]) -> Iterator[AuthRoute]:
    """
    Yield every `AuthRoute` reachable from `routes`, including routes inside
    included routers and mounts, whether or not FastAPI flattened them.
    """

    seen: set[int] = set()
    stack = list(reversed(list(routes)))
    while stack:
        route = stack.pop()
        if id(route) in seen:
            continue
        seen.add(id(route))
        if isinstance(route, AuthRoute):
            yield route
            continue
        for owner in (route, getattr(route, "original_router", None)):
            children = getattr(owner, "routes", None)
            if children:
                stack.extend(reversed(list(children)))


def install_auth(app: FastAPI, registry: AuthRegistry) -> AuthDecisionEngine:
    """
    Attach the registry + engine to `app.state` and check every `AuthRoute`.

    Call after all routers are included. Raises `UnknownStrategyName` /
    `NoDefaultStrategyConfigured`, so a misconfigured app never starts serving.
    """

    engine = AuthDecisionEngine(registry)
    routes = list(iter_auth_routes(app.routes))
    for route in routes:
        try:
            engine.validate_route(route.route_auth)
        except Exception:
            log.error("auth.route_misconfigured", route=route.path, methods=sorted(route.methods))
            raise

    app.state.auth_registry = registry
    app.state.auth_engine = engine
    log.info("auth.installed", routes=len(routes), strategies=registry.names())
    return engine


# --- Module Notes -----------------------------------------------------------
# Routes that are not `AuthRoute` (docs, openapi.json) bypass auth entirely.
