"""
routeguard.api.routers.session

Cookie-session pages.

Responsibilities:
- `/` and `/login` run in try mode: anonymous callers get through.
- `/login` is the only place a session cookie is issued.
- `/welcome` declares nothing, so the registry default strategy guards it.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from routeguard.api.cookies import clear_session_cookie, set_session_cookie
from routeguard.api.deps import cookie_strategy_dep, get_auth, store_dep
from routeguard.api.routing import AuthRoute, auth
from routeguard.api.strategies import COOKIE_STRATEGY
from routeguard.auth.models import AuthContext
from routeguard.auth.schemes import COOKIE
from routeguard.auth.store import CredentialStore, verify_password
from routeguard.auth.strategy import Strategy
from routeguard.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(route_class=AuthRoute, tags=["session"])


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=256)
    password: str = Field(max_length=1024)


def _display_name(ctx: AuthContext) -> str:
    if not ctx.is_authenticated:
        return "stranger"
    creds = ctx.credentials
    if isinstance(creds, dict):
        return creds.get("name") or creds.get("username") or "stranger"
    return str(creds)


@router.get("/")
@auth(mode="try", strategy=COOKIE_STRATEGY)
async def home(ctx: AuthContext = Depends(get_auth)) -> dict[str, Any]:
    if ctx.is_authenticated:
        return {"authenticated": True, "message": f"Hello {_display_name(ctx)}"}
    return {"authenticated": False, "message": "Please log in", "login": "/login"}


@router.post("/login")
@auth(mode="try", strategy=COOKIE_STRATEGY)
async def login(
    body: LoginRequest,
    store: CredentialStore = Depends(store_dep),
    strategy: Strategy = Depends(cookie_strategy_dep),
) -> RedirectResponse:
    principal = verify_password(store, body.username, body.password)
    if principal is None:
        log.info("login.failed")
        return RedirectResponse("/", status_code=HTTP_303_SEE_OTHER)

    # Keep the session minimal: identity only, never the password.
    value = COOKIE.issue(strategy.options, {"username": principal.username})
    response = RedirectResponse("/welcome", status_code=HTTP_303_SEE_OTHER)
    set_session_cookie(response, strategy.options, value)
    log.info("login.succeeded", user_id=principal.id)
    return response


@router.post("/logout")
@auth(False)
async def logout(strategy: Strategy = Depends(cookie_strategy_dep)) -> RedirectResponse:
    response = RedirectResponse("/", status_code=HTTP_303_SEE_OTHER)
    clear_session_cookie(response, strategy.options)
    return response


@router.get("/welcome")
async def welcome(ctx: AuthContext = Depends(get_auth)) -> dict[str, Any]:
    return {"message": f"Welcome {_display_name(ctx)}", "strategy": ctx.strategy}


# --- Module Notes -----------------------------------------------------------
# Issuing lives here, not in the engine: enforcement is read-only on every request.
