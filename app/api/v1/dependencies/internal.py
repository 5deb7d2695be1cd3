"""Dependencies for internal (cron-triggered) routes."""

from __future__ import annotations

import secrets
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Annotated

from fastapi import Header, HTTPException

from app.application.dtos.agency import DeletionSweepResult
from app.core.config import get_settings
from app.core.constants import DELETION_SWEEP_SECRET_HEADER
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.services import run_deletion_sweep

DeletionSweepRunner = Callable[..., Awaitable[DeletionSweepResult]]


def verify_sweep_secret(
    sweep_secret: Annotated[str | None, Header(alias=DELETION_SWEEP_SECRET_HEADER)] = None,
) -> None:
    """Require the shared sweep secret; 503 when none is configured, 403 on mismatch."""
    configured = get_settings().deletion_sweep_secret
    if configured is None or not configured.get_secret_value():
        raise HTTPException(status_code=503, detail="Deletion sweep is not configured")
    if not sweep_secret or not secrets.compare_digest(
        sweep_secret.encode(), configured.get_secret_value().encode()
    ):
        raise HTTPException(status_code=403, detail="Forbidden")


def get_deletion_sweep() -> DeletionSweepRunner:
    """Sweep bound to the session factory; it opens one session per agency."""
    return partial(run_deletion_sweep, get_session_factory())
