from __future__ import annotations

from datetime import timedelta

import pytest

from helpers import SECRET, tamper
from routeguard.auth.errors import InvalidSignature
from routeguard.auth.session import SessionCodecConfig, decode_session, encode_session

CFG = SessionCodecConfig(secret=SECRET)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"username": "alice"},
        {"username": "zoë", "role": "admin", "note": "a=b; c"},
    ],
)
def test_decode_inverts_encode(payload: dict[str, str]) -> None:
    assert decode_session(cfg=CFG, token=encode_session(cfg=CFG, payload=payload)) == payload


def test_tampered_value_rejected() -> None:
    token = encode_session(cfg=CFG, payload={"username": "alice"})
    with pytest.raises(InvalidSignature):
        decode_session(cfg=CFG, token=tamper(token))


def test_other_secret_rejected() -> None:
    token = encode_session(cfg=CFG, payload={"username": "alice"})
    rotated = SessionCodecConfig(secret="another-session-secret-0123456789abcdef")
    with pytest.raises(InvalidSignature):
        decode_session(cfg=rotated, token=token)


def test_expired_session_rejected() -> None:
    expired = SessionCodecConfig(secret=SECRET, ttl=timedelta(seconds=-10))
    token = encode_session(cfg=expired, payload={"username": "alice"})
    with pytest.raises(InvalidSignature):
        decode_session(cfg=expired, token=token)


def test_garbage_rejected() -> None:
    with pytest.raises(InvalidSignature):
        decode_session(cfg=CFG, token="not-a-session")


def test_non_string_payload_refused_at_encode() -> None:
    with pytest.raises(TypeError):
        encode_session(cfg=CFG, payload={"id": 1})  # type: ignore[dict-item]
