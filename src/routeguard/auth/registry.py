"""
routeguard.auth.registry

Strategy registry.

Responsibilities:
- Own every configured strategy under a unique name.
- Track the (single, optional) default strategy.
"""

from __future__ import annotations

import threading

from routeguard.auth.errors import (
    DuplicateStrategyName,
    NoDefaultStrategyConfigured,
    UnknownStrategyName,
)
from routeguard.auth.strategy import Strategy
from routeguard.observability.logging import get_logger

log = get_logger(__name__)


class AuthRegistry:
    """
    Constructed explicitly at startup and handed to the decision engine.

    Reads are lock-free dict lookups. Mutations are serialized so that swapping the
    default is atomic: there is never a moment with zero or two defaults.
    """

    def __init__(self) -> None:
        self._strategies: dict[str, Strategy] = {}
        self._default: Strategy | None = None
        self._lock = threading.Lock()

    def register(self, strategy: Strategy, *, default: bool = False) -> Strategy:
        with self._lock:
            if strategy.name in self._strategies:
                raise DuplicateStrategyName(strategy.name)
            self._strategies[strategy.name] = strategy
            if default:
                self._default = strategy
        log.info(
            "auth.strategy_registered",
            strategy=strategy.name,
            scheme=strategy.scheme_tag,
            default=default,
        )
        return strategy

    def unregister(self, name: str) -> Strategy:
        with self._lock:
            strategy = self._strategies.pop(name, None)
            if strategy is None:
                raise UnknownStrategyName(name)
            if self._default is strategy:
                self._default = None
        return strategy

    def resolve(self, name: str) -> Strategy:
        try:
            return self._strategies[name]
        except KeyError:
            raise UnknownStrategyName(name) from None

    def set_default(self, name: str) -> None:
        with self._lock:
            if name not in self._strategies:
                raise UnknownStrategyName(name)
            self._default = self._strategies[name]

    def clear_default(self) -> None:
        with self._lock:
            self._default = None

    @property
    def default(self) -> Strategy | None:
        # One attribute read; a concurrent swap yields either the old or the new default.
        return self._default

    def require_default(self) -> Strategy:
        strategy = self.default
        if strategy is None:
            raise NoDefaultStrategyConfigured()
        return strategy

    def names(self) -> list[str]:
        return list(self._strategies)

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


# --- Module Notes -----------------------------------------------------------
# No module-level registry instance exists; the app factory builds one and stores it
# on `app.state` (see `routeguard.api.routing.install_auth`).
