"""Unit tests for Settings validation."""

import pytest
from pydantic import SecretStr, ValidationError

from app.core.config import Settings

DB_URL = "postgresql+asyncpg://u:p@localhost:5432/db"


def test_database_url_required() -> None:
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        Settings(database_url="", secret_key="k", _env_file=None)


def test_secret_key_required() -> None:
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        Settings(database_url=DB_URL, secret_key="", _env_file=None)


def test_grace_period_must_be_positive() -> None:
    with pytest.raises(ValidationError, match="DELETION_GRACE_PERIOD_DAYS"):
        Settings(database_url=DB_URL, secret_key="k", deletion_grace_period_days=0, _env_file=None)


def test_stripe_configured() -> None:
    base = {"database_url": DB_URL, "secret_key": "k", "_env_file": None}
    assert Settings(**base, stripe_secret_key=None).stripe_configured is False
    assert Settings(**base, stripe_secret_key=SecretStr("")).stripe_configured is False
    assert Settings(**base, stripe_secret_key="sk_test_1").stripe_configured is True
