"""
routeguard.api.cookies

Response helpers for the session cookie.
"""

from __future__ import annotations

from starlette.responses import Response

from routeguard.auth.schemes import CookieOptions


def set_session_cookie(response: Response, options: CookieOptions, value: str) -> None:
    max_age = int(options.ttl.total_seconds()) if options.ttl is not None else None
    response.set_cookie(
        options.cookie_name,
        value,
        max_age=max_age,
        path=options.path,
        secure=options.secure,
        httponly=options.http_only,
        samesite=options.same_site,
    )


def clear_session_cookie(response: Response, options: CookieOptions) -> None:
    # Attributes must match the ones used when setting, or browsers keep the cookie.
    response.delete_cookie(
        options.cookie_name,
        path=options.path,
        secure=options.secure,
        httponly=options.http_only,
        samesite=options.same_site,
    )
