"""
tests.helpers

Small request-building helpers shared by the test modules.
"""

from __future__ import annotations

import base64

import httpx

SECRET = "test-session-secret-0123456789abcdef"


def basic_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def tamper(value: str) -> str:
    # Flip one character inside the signed payload segment.
    i = value.index(".") + 3
    replacement = "A" if value[i] != "A" else "B"
    return value[:i] + replacement + value[i + 1 :]


def set_cookies(response: httpx.Response) -> dict[str, tuple[str, str]]:
    """
    Map cookie name -> (value, raw Set-Cookie header) for every cookie on a response.
    """

    out: dict[str, tuple[str, str]] = {}
    for raw in response.headers.get_list("set-cookie"):
        name, _, rest = raw.partition("=")
        value = rest.split(";", 1)[0].strip().strip('"')
        out[name.strip()] = (value, raw)
    return out
