"""
routeguard.auth.validators

Validator contract and store-backed validator factories.

Responsibilities:
- Define `ValidationResult` and the Basic/session validator call shapes.
- Invoke sync or async validators uniformly.
- Provide validators that consult a `CredentialStore`.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from routeguard.auth.models import AuthRequest, Principal
from routeguard.auth.store import CredentialStore, verify_password


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    credentials: Any = None

    @classmethod
    def ok(cls, credentials: Any = None) -> ValidationResult:
        return cls(valid=True, credentials=credentials)

    @classmethod
    def rejected(cls) -> ValidationResult:
        return cls(valid=False)


_Result = ValidationResult | Awaitable[ValidationResult]

BasicValidator = Callable[[AuthRequest, str, str], _Result]
SessionValidator = Callable[[AuthRequest, Mapping[str, str]], _Result]


async def call_validator(validator: Callable[..., _Result], *args: Any) -> ValidationResult:
    result = validator(*args)
    if inspect.isawaitable(result):
        result = await result
    if not isinstance(result, ValidationResult):
        raise TypeError(f"validator returned {type(result).__name__}, expected ValidationResult")
    return result


def principal_credentials(principal: Principal) -> dict[str, Any]:
    return {"id": principal.id, "username": principal.username, "name": principal.display_name}


def store_basic_validator(store: CredentialStore) -> BasicValidator:
    def validate(request: AuthRequest, username: str, password: str) -> ValidationResult:
        principal = verify_password(store, username, password)
        if principal is None:
            return ValidationResult.rejected()
        return ValidationResult.ok(principal_credentials(principal))

    return validate


def store_session_validator(store: CredentialStore) -> SessionValidator:
    """
    Accepts a session only while its `username` still names a known principal.
    The decoded session itself becomes the request credentials.
    """

    def validate(request: AuthRequest, session: Mapping[str, str]) -> ValidationResult:
        username = session.get("username")
        if not username or store.lookup(username) is None:
            return ValidationResult.rejected()
        return ValidationResult.ok()

    return validate


# --- Module Notes -----------------------------------------------------------
# Validators run inline on the event loop; an I/O-bound validator should be `async def`.
