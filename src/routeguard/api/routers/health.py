"""
routeguard.api.routers.health

Liveness endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

from routeguard.api.routing import AuthRoute, auth

router = APIRouter(route_class=AuthRoute)


@router.get("/healthz")
@auth(False)
async def healthz() -> dict[str, str]:
    return {"status": "ok"}
