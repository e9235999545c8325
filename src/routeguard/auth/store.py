"""
routeguard.auth.store

Credential store contract and the in-memory implementation.

Responsibilities:
- Look up principals by username (NotFound is `None`, never an exception).
- Verify a username/password pair without distinguishable failure paths.
"""

from __future__ import annotations

import hmac
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol

from routeguard.auth.models import Principal

# Compared against when the username is unknown so both failure paths do the same work.
_DUMMY_SECRET = "routeguard-dummy-secret"


class CredentialStore(Protocol):
    def lookup(self, username: str) -> Principal | None: ...


def _secrets_match(given: str, stored: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), stored.encode("utf-8"))


def verify_password(store: CredentialStore, username: str, password: str) -> Principal | None:
    principal = store.lookup(username)
    stored = principal.password if principal is not None else _DUMMY_SECRET
    matched = _secrets_match(password, stored)
    if principal is None or not matched:
        return None
    return principal


class InMemoryCredentialStore:
    """
    Read-only map of principals, built once at startup.
    """

    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        users: dict[str, Principal] = {}
        for p in principals:
            if p.username in users:
                raise ValueError(f"duplicate username: {p.username!r}")
            users[p.username] = p
        self._users = users

    @classmethod
    def from_config(cls, entries: Iterable[Mapping[str, Any] | Any]) -> InMemoryCredentialStore:
        # Accepts plain mappings or settings models exposing the same attribute names.
        principals = []
        for e in entries:
            data = e if isinstance(e, Mapping) else e.model_dump()
            principals.append(
                Principal(
                    username=data["username"],
                    password=data["password"],
                    id=int(data["id"]),
                    display_name=data.get("display_name") or data["username"],
                )
            )
        return cls(principals)

    def lookup(self, username: str) -> Principal | None:
        return self._users.get(username)

    def verify(self, username: str, password: str) -> Principal | None:
        return verify_password(self, username, password)

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[Principal]:
        return iter(self._users.values())


# --- Module Notes -----------------------------------------------------------
# A database-backed store only needs `lookup`; `verify_password` works against any store.
