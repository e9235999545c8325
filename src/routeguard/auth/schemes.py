"""
routeguard.auth.schemes

Authentication schemes.

Responsibilities:
- `BasicScheme`: credentials from `Authorization: Basic ...`, re-validated every request.
- `CookieScheme`: session from a signed cookie; `issue` is called by application code only.
- Describe how a deny should look on the wire (`Challenge`).

Schemes are stateless. All configuration lives in the options record carried by a
`Strategy`, so one scheme instance serves any number of strategies.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Literal, Protocol

from routeguard.auth.errors import (
    CredentialsError,
    InvalidSignature,
    MalformedHeader,
    MissingCookie,
    ValidatorRejected,
)
from routeguard.auth.models import AuthRequest
from routeguard.auth.session import SessionCodecConfig, decode_session, encode_session
from routeguard.auth.validators import BasicValidator, SessionValidator, call_validator

SchemeTag = Literal["basic", "cookie"]

MIN_SECRET_BYTES = 32


@dataclass(frozen=True, slots=True)
class Challenge:
    www_authenticate: str | None = None
    redirect_to: str | None = None
    clear_cookie: str | None = None


class Scheme(Protocol):
    tag: SchemeTag

    def extract(self, request: AuthRequest, options: Any) -> Any: ...

    async def enforce(self, request: AuthRequest, raw: Any, options: Any) -> Any: ...

    def challenge(self, options: Any, error: CredentialsError) -> Challenge: ...


async def authenticate(scheme: Scheme, request: AuthRequest, options: Any) -> Any:
    # Extraction strictly precedes validation.
    raw = scheme.extract(request, options)
    return await scheme.enforce(request, raw, options)


# --- Basic ------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BasicOptions:
    validator: BasicValidator
    realm: str = "routeguard"
    allow_empty_username: bool = False


class BasicScheme:
    tag: SchemeTag = "basic"

    def extract(self, request: AuthRequest, options: BasicOptions) -> tuple[str, str]:
        header = request.header("authorization")
        if not header:
            raise MalformedHeader("missing authorization header")

        scheme, _, param = header.strip().partition(" ")
        if scheme.lower() != "basic":
            raise MalformedHeader("authorization scheme is not basic")

        try:
            decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
        except ValueError as e:
            # Covers binascii.Error, UnicodeDecodeError and non-ASCII input.
            raise MalformedHeader("undecodable basic credentials") from e

        username, sep, password = decoded.partition(":")
        if not sep:
            raise MalformedHeader("basic credentials missing ':' separator")
        if not username and not options.allow_empty_username:
            raise MalformedHeader("empty username")
        return username, password

    async def enforce(
        self, request: AuthRequest, raw: tuple[str, str], options: BasicOptions
    ) -> Any:
        username, password = raw
        result = await call_validator(options.validator, request, username, password)
        if not result.valid:
            raise ValidatorRejected("bad username or password")
        if result.credentials is None:
            return {"username": username}
        return result.credentials

    def challenge(self, options: BasicOptions, error: CredentialsError) -> Challenge:
        # Basic never redirects; a deny is always a 401 challenge.
        return Challenge(www_authenticate=f'Basic realm="{options.realm}"')


# --- Cookie -----------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CookieOptions:
    secret: str = field(repr=False)
    validator: SessionValidator
    cookie_name: str = "session"
    secure: bool = True
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"
    path: str = "/"
    ttl: timedelta | None = None
    redirect_to: str | None = None
    append_next: bool = False
    clear_invalid: bool = True
    alg: str = "HS256"

    def __post_init__(self) -> None:
        if len(self.secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(f"cookie secret must be at least {MIN_SECRET_BYTES} bytes")
        if not self.cookie_name:
            raise ValueError("cookie name must not be empty")

    @property
    def codec(self) -> SessionCodecConfig:
        return SessionCodecConfig(secret=self.secret, alg=self.alg, ttl=self.ttl)


class CookieScheme:
    tag: SchemeTag = "cookie"

    def issue(self, options: CookieOptions, payload: Mapping[str, str]) -> str:
        """
        Pack and sign a session payload into a cookie value.

        Only application code (a login handler) calls this, after it has verified
        the login itself. The decision engine never issues sessions.
        """

        return encode_session(cfg=options.codec, payload=payload)

    def decode(self, options: CookieOptions, value: str) -> dict[str, str]:
        return decode_session(cfg=options.codec, token=value)

    def extract(self, request: AuthRequest, options: CookieOptions) -> dict[str, str]:
        value = request.cookies.get(options.cookie_name)
        if not value:
            raise MissingCookie(f"no {options.cookie_name!r} cookie")
        return self.decode(options, value)

    async def enforce(
        self, request: AuthRequest, raw: dict[str, str], options: CookieOptions
    ) -> Any:
        # A valid signature is necessary but not sufficient: the validator decides.
        result = await call_validator(options.validator, request, raw)
        if not result.valid:
            raise ValidatorRejected("session rejected")
        if result.credentials is None:
            return raw
        return result.credentials

    def challenge(self, options: CookieOptions, error: CredentialsError) -> Challenge:
        stale = isinstance(error, (InvalidSignature, ValidatorRejected))
        return Challenge(
            redirect_to=options.redirect_to,
            clear_cookie=options.cookie_name if stale and options.clear_invalid else None,
        )


BASIC = BasicScheme()
COOKIE = CookieScheme()


# --- Module Notes -----------------------------------------------------------
# New schemes implement extract/enforce/challenge and get a branch in build_strategy.
