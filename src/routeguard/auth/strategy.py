"""
routeguard.auth.strategy

Named, configured applications of a scheme.

Responsibilities:
- Pair a scheme with its options under a unique name.
- Build strategies from the "basic" | "cookie" configuration surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from routeguard.auth.schemes import (
    BASIC,
    COOKIE,
    BasicOptions,
    CookieOptions,
    Scheme,
)
from routeguard.auth.validators import BasicValidator, SessionValidator


@dataclass(frozen=True, slots=True)
class Strategy:
    name: str
    scheme: Scheme
    options: Any

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("strategy name must not be empty")

    @property
    def scheme_tag(self) -> str:
        return self.scheme.tag


def basic_strategy(
    name: str,
    *,
    validator: BasicValidator,
    realm: str = "routeguard",
    allow_empty_username: bool = False,
) -> Strategy:
    options = BasicOptions(
        validator=validator, realm=realm, allow_empty_username=allow_empty_username
    )
    return Strategy(name=name, scheme=BASIC, options=options)


def cookie_strategy(
    name: str,
    *,
    secret: str,
    validator: SessionValidator,
    cookie_name: str = "session",
    secure: bool = True,
    redirect_to: str | None = None,
    ttl: timedelta | None = None,
    **extra: Any,
) -> Strategy:
    options = CookieOptions(
        secret=secret,
        validator=validator,
        cookie_name=cookie_name,
        secure=secure,
        redirect_to=redirect_to,
        ttl=ttl,
        **extra,
    )
    return Strategy(name=name, scheme=COOKIE, options=options)


def build_strategy(name: str, scheme: str, **options: Any) -> Strategy:
    """
    Build a strategy from its configuration surface, e.g.::

        build_strategy("login", "cookie", secret=..., validator=..., redirect_to="/")
    """

    tag = scheme.lower()
    if tag == BASIC.tag:
        return basic_strategy(name, **options)
    if tag == COOKIE.tag:
        return cookie_strategy(name, **options)
    raise ValueError(f"unknown scheme: {scheme!r}")


# --- Module Notes -----------------------------------------------------------
# Strategies are frozen; reconfiguring one means registering a replacement.
