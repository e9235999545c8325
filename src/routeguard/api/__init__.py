"""
routeguard.api

API package for the routeguard service.

Responsibilities:
- FastAPI app factory and router modules.
- Router-side enforcement of auth decisions (`routing.AuthRoute`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: it enforces decisions computed in `routeguard.auth`.
