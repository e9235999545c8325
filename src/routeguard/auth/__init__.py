"""
routeguard.auth

Authentication package.

Responsibilities:
- Schemes (Basic, Cookie) and the strategies configured from them.
- Strategy registry and the per-request decision engine.
- Credential store and validator contracts.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package imports FastAPI; the router side lives in `routeguard.api`.
