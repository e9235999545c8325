"""
routeguard.auth.session

Session cookie codec.

Responsibilities:
- Sign a session payload (string -> string mapping) into a compact JWS cookie value.
- Verify and decode cookie values, mapping every failure to `InvalidSignature`.

Note:
- Values are signed (HS256), not encrypted. Do not put secrets into a session.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from routeguard.auth.errors import InvalidSignature

# Private claim holding the session payload.
SESSION_CLAIM = "ses"


@dataclass(frozen=True, slots=True)
class SessionCodecConfig:
    secret: str = field(repr=False)
    alg: str = "HS256"
    ttl: timedelta | None = None


def check_payload(payload: Mapping[str, Any]) -> dict[str, str]:
    if not isinstance(payload, Mapping):
        raise TypeError("session payload must be a mapping")
    for k, v in payload.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise TypeError("session payload keys and values must be strings")
    return dict(payload)


def encode_session(*, cfg: SessionCodecConfig, payload: Mapping[str, str]) -> str:
    now = datetime.now(tz=UTC)
    claims: dict[str, Any] = {
        SESSION_CLAIM: check_payload(payload),
        "iat": int(now.timestamp()),
    }
    if cfg.ttl is not None:
        claims["exp"] = int((now + cfg.ttl).timestamp())
    return jwt.encode(claims, cfg.secret, algorithm=cfg.alg)


def decode_session(*, cfg: SessionCodecConfig, token: str) -> dict[str, str]:
    try:
        # Signature + exp (when present) are enforced by jwt.decode.
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            options={"require": ["iat", SESSION_CLAIM]},
        )
    except InvalidTokenError as e:
        raise InvalidSignature(str(e)) from e

    try:
        return check_payload(claims[SESSION_CLAIM])
    except TypeError as e:
        raise InvalidSignature(f"malformed session payload: {e}") from e


# --- Module Notes -----------------------------------------------------------
# Rotating the secret invalidates every outstanding session (decode fails as InvalidSignature).
