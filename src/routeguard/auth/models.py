"""
routeguard.auth.models

Auth domain models.

Responsibilities:
- Define the known identity type (`Principal`) held by credential stores.
- Define the framework-neutral request view consumed by schemes (`AuthRequest`).
- Define route descriptors (`RouteAuth`) and the per-request `AuthDecision`.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from starlette.requests import cookie_parser


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Known identity with stored secret material.
    """

    username: str
    password: str = field(repr=False)
    id: int
    display_name: str


@dataclass(frozen=True, slots=True)
class AuthRequest:
    """
    The parts of an incoming request that schemes are allowed to see.

    `headers` must be looked up case-insensitively; use `header()` rather than
    indexing directly.
    """

    headers: Mapping[str, str]
    cookies: Mapping[str, str]
    path: str = "/"
    payload: Any = None

    @classmethod
    def create(
        cls,
        *,
        headers: Mapping[str, str] | None = None,
        cookies: Mapping[str, str] | None = None,
        path: str = "/",
        payload: Any = None,
    ) -> AuthRequest:
        lowered = {k.lower(): v for k, v in (headers or {}).items()}
        if cookies is None:
            cookies = cookie_parser(lowered.get("cookie", ""))
        return cls(headers=lowered, cookies=dict(cookies), path=path, payload=payload)

    @classmethod
    def from_starlette(cls, request: Any) -> AuthRequest:
        # Starlette's Headers mapping is already case-insensitive.
        return cls(headers=request.headers, cookies=request.cookies, path=request.url.path)

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


class AuthMode(str, enum.Enum):
    REQUIRED = "required"
    TRY = "try"
    NONE = "none"


DEFAULT_STRATEGY = "default"


@dataclass(frozen=True, slots=True)
class RouteAuth:
    """
    Per-route auth descriptor.

    `strategy=None` (or "default") means "whatever the registry default is".
    """

    mode: AuthMode = AuthMode.REQUIRED
    strategy: str | None = None

    @property
    def uses_default(self) -> bool:
        return self.strategy is None or self.strategy == DEFAULT_STRATEGY

    @classmethod
    def coerce(cls, value: Any) -> RouteAuth | None:
        """
        Accepts the shorthands route tables usually carry:

        - None -> no descriptor (registry default applies, if any)
        - False -> auth disabled
        - "name" -> required with that strategy
        - {"mode": "try", "strategy": "name"} -> explicit
        """

        if value is None or isinstance(value, RouteAuth):
            return value
        if value is False:
            return cls(mode=AuthMode.NONE)
        if isinstance(value, str):
            return cls(mode=AuthMode.REQUIRED, strategy=value)
        if isinstance(value, Mapping):
            raw_mode = str(value.get("mode", AuthMode.REQUIRED.value)).lower()
            if raw_mode == "optional":
                raw_mode = AuthMode.TRY.value
            return cls(mode=AuthMode(raw_mode), strategy=value.get("strategy"))
        raise TypeError(f"unsupported route auth descriptor: {value!r}")


class Outcome(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"
    REDIRECT = "redirect"


@dataclass(frozen=True, slots=True)
class AuthDecision:
    outcome: Outcome
    credentials: Any = None
    redirect_location: str | None = None
    # Name of the strategy that produced the decision (None when auth was skipped).
    strategy: str | None = None
    # Error code of the credential failure behind a deny/redirect/downgrade.
    error: str | None = None
    # Value for a `WWW-Authenticate` header, when the scheme offers one.
    challenge: str | None = None
    # Cookie name the router must clear on the outgoing response.
    clear_cookie: str | None = None
    mode: AuthMode = AuthMode.NONE

    @classmethod
    def allow(cls, credentials: Any = None, **kw: Any) -> AuthDecision:
        return cls(outcome=Outcome.ALLOW, credentials=credentials, **kw)

    @classmethod
    def deny(cls, **kw: Any) -> AuthDecision:
        return cls(outcome=Outcome.DENY, **kw)

    @classmethod
    def redirect(cls, location: str, **kw: Any) -> AuthDecision:
        return cls(outcome=Outcome.REDIRECT, redirect_location=location, **kw)

    @property
    def is_authenticated(self) -> bool:
        return self.outcome is Outcome.ALLOW and self.credentials is not None


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    What a route handler sees about the caller, for the lifetime of one request.
    """

    credentials: Any = None
    strategy: str | None = None
    mode: AuthMode = AuthMode.NONE

    @property
    def is_authenticated(self) -> bool:
        return self.credentials is not None


# --- Module Notes -----------------------------------------------------------
# Keep these models framework-neutral; `AuthRequest.from_starlette` is the only adapter.
