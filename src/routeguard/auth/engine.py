"""
routeguard.auth.engine

Per-request authentication decision engine.

Responsibilities:
- Resolve which strategy and mode apply to a route (route > registry default > none).
- Run the scheme's extract + validate pipeline.
- Collapse credential failures into Deny / Redirect, or Allow(None) in try mode.
- Deny (never raise) when a request reaches a route the registry cannot resolve.
- Check route descriptors against the registry at startup.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote, urlsplit

from routeguard.auth.errors import AuthConfigurationError, CredentialsError
from routeguard.auth.models import AuthDecision, AuthMode, AuthRequest, RouteAuth
from routeguard.auth.registry import AuthRegistry
from routeguard.auth.schemes import authenticate
from routeguard.auth.strategy import Strategy
from routeguard.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedAuth:
    strategy: Strategy
    mode: AuthMode


def with_next(location: str, path: str) -> str:
    sep = "&" if urlsplit(location).query else "?"
    return f"{location}{sep}next={quote(path, safe='/')}"


class AuthDecisionEngine:
    """
    Read-only over the registry; holds no per-request state, so one instance is
    shared by every in-flight request.
    """

    def __init__(self, registry: AuthRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> AuthRegistry:
        return self._registry

    def resolve(self, route: RouteAuth | None) -> ResolvedAuth | None:
        if route is None:
            # No route-level mode: the default strategy (if any) applies as required.
            default = self._registry.default
            if default is None:
                return None
            return ResolvedAuth(strategy=default, mode=AuthMode.REQUIRED)

        if route.mode is AuthMode.NONE:
            return None

        if route.uses_default:
            strategy = self._registry.require_default()
        else:
            strategy = self._registry.resolve(route.strategy)  # type: ignore[arg-type]
        return ResolvedAuth(strategy=strategy, mode=route.mode)

    def validate_route(self, route: RouteAuth | None) -> None:
        # Raises UnknownStrategyName / NoDefaultStrategyConfigured on misconfiguration.
        self.resolve(route)

    def validate_routes(self, routes: Iterable[RouteAuth | None]) -> None:
        for route in routes:
            self.validate_route(route)

    async def decide(self, request: AuthRequest, route: RouteAuth | None) -> AuthDecision:
        try:
            resolved = self.resolve(route)
        except AuthConfigurationError as e:
            # Startup validation should have caught this; fail closed per request.
            log.error("auth.misconfigured", path=request.path, error=e.code)
            return AuthDecision.deny(error=e.code)

        if resolved is None:
            return AuthDecision.allow()

        strategy, mode = resolved.strategy, resolved.mode
        try:
            credentials = await authenticate(strategy.scheme, request, strategy.options)
        except CredentialsError as e:
            return self._on_failure(request, strategy, mode, e)

        log.debug("auth.allow", strategy=strategy.name, mode=mode.value)
        return AuthDecision.allow(credentials, strategy=strategy.name, mode=mode)

    def _on_failure(
        self,
        request: AuthRequest,
        strategy: Strategy,
        mode: AuthMode,
        error: CredentialsError,
    ) -> AuthDecision:
        challenge = strategy.scheme.challenge(strategy.options, error)
        common = {
            "strategy": strategy.name,
            "mode": mode,
            "error": error.code,
            "clear_cookie": challenge.clear_cookie,
        }

        if mode is AuthMode.TRY:
            # Proceed unauthenticated; the handler branches on missing credentials.
            log.debug("auth.try_unauthenticated", strategy=strategy.name, error=error.code)
            return AuthDecision.allow(None, **common)

        if challenge.redirect_to:
            location = challenge.redirect_to
            if getattr(strategy.options, "append_next", False):
                location = with_next(location, request.path)
            log.info("auth.redirect", strategy=strategy.name, error=error.code)
            return AuthDecision.redirect(location, **common)

        log.info("auth.deny", strategy=strategy.name, error=error.code)
        return AuthDecision.deny(challenge=challenge.www_authenticate, **common)


# --- Module Notes -----------------------------------------------------------
# asyncio.CancelledError is not caught here: a cancelled request yields no decision
# and no side effects (the engine never writes cookies or request state itself).
