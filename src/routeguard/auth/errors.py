"""
routeguard.auth.errors

Authentication error taxonomy.

Responsibilities:
- Per-request credential failures (collapse to deny/redirect inside the engine).
- Startup configuration failures (fatal; halt app construction).
"""

from __future__ import annotations


class AuthError(Exception):
    code = "auth_error"


class CredentialsError(AuthError):
    """
    Raised by schemes while extracting or validating credentials.
    Never crosses the decision engine boundary.
    """

    code = "credentials_error"


class MalformedHeader(CredentialsError):
    code = "malformed_header"


class MissingCookie(CredentialsError):
    code = "missing_cookie"


class InvalidSignature(CredentialsError):
    code = "invalid_signature"


class ValidatorRejected(CredentialsError):
    code = "validator_rejected"


class AuthConfigurationError(AuthError):
    code = "configuration_error"


class NoDefaultStrategyConfigured(AuthConfigurationError):
    code = "no_default_strategy"

    def __init__(self) -> None:
        super().__init__("route requires the default strategy but none is registered")


class UnknownStrategyName(AuthConfigurationError):
    code = "unknown_strategy"

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown strategy: {name!r}")
        self.name = name


class DuplicateStrategyName(AuthConfigurationError):
    code = "duplicate_strategy"

    def __init__(self, name: str) -> None:
        super().__init__(f"strategy already registered: {name!r}")
        self.name = name
