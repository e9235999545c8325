from __future__ import annotations

import pytest

from helpers import SECRET
from routeguard.auth.models import Principal
from routeguard.auth.registry import AuthRegistry
from routeguard.auth.store import InMemoryCredentialStore
from routeguard.auth.strategy import Strategy, basic_strategy, cookie_strategy
from routeguard.auth.validators import store_basic_validator, store_session_validator


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore(
        [
            Principal(username="alice", password="secret", id=1, display_name="Alice Liddell"),
            Principal(username="carol", password="p:a:ss", id=2, display_name="Carol"),
        ]
    )


@pytest.fixture
def basic(store: InMemoryCredentialStore) -> Strategy:
    return basic_strategy("login-basic", validator=store_basic_validator(store), realm="test")


@pytest.fixture
def cookie(store: InMemoryCredentialStore) -> Strategy:
    return cookie_strategy(
        "login-cookie",
        secret=SECRET,
        validator=store_session_validator(store),
        secure=False,
        redirect_to="/login-page",
    )


@pytest.fixture
def registry(basic: Strategy, cookie: Strategy) -> AuthRegistry:
    r = AuthRegistry()
    r.register(basic)
    r.register(cookie, default=True)
    return r
