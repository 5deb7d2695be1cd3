"""Unit tests for bearer token verification."""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import get_settings
from app.infrastructure.security.jwt import token_subject, verify_token
from app.shared.utils.datetime import utc_now


def _encode(claims: dict, key: str | None = None) -> str:
    settings = get_settings()
    return jwt.encode(
        claims, key or settings.secret_key.get_secret_value(), algorithm=settings.algorithm
    )


def test_valid_token(make_token) -> None:
    payload = verify_token(make_token("user-42"))
    assert token_subject(payload) == "user-42"


def test_expired_token(make_token) -> None:
    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(make_token(expires_in=timedelta(minutes=-5)))


def test_wrong_signature() -> None:
    token = _encode({"sub": "u1", "exp": utc_now() + timedelta(hours=1)}, key="other-key")
    with pytest.raises(ValueError):
        verify_token(token)


def test_missing_exp_rejected() -> None:
    with pytest.raises(ValueError):
        verify_token(_encode({"sub": "u1"}))


def test_missing_sub_rejected() -> None:
    with pytest.raises(ValueError):
        verify_token(_encode({"exp": utc_now() + timedelta(hours=1)}))


@pytest.mark.parametrize("payload", [{}, {"sub": ""}, {"sub": 42}])
def test_token_subject_requires_string(payload) -> None:
    with pytest.raises(ValueError, match="sub"):
        token_subject(payload)
