from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from routeguard.api.deps import get_auth
from routeguard.api.routing import AuthRoute, auth
from routeguard.api.strategies import BASIC_STRATEGY
from routeguard.auth.models import AuthContext

router = APIRouter(prefix="/basic", route_class=AuthRoute, tags=["basic"])


@router.get("/login")
@auth(BASIC_STRATEGY)
async def basic_login(ctx: AuthContext = Depends(get_auth)) -> dict[str, Any]:
    # Credentials come straight from the validator: {"id", "username", "name"}.
    return {"message": "Successfully logged in", "user": ctx.credentials}
