"""Internal API for scheduled jobs. Protected by a shared secret header, not user auth."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_deletion_sweep, verify_sweep_secret
from app.api.v1.dependencies.internal import DeletionSweepRunner
from app.core.config import get_settings
from app.schemas.gdpr import DeletionSweepResponse

router = APIRouter(dependencies=[Depends(verify_sweep_secret)])


@router.post("/deletion-sweep", response_model=DeletionSweepResponse)
async def run_agency_deletion_sweep(
    sweep: Annotated[DeletionSweepRunner, Depends(get_deletion_sweep)],
    batch_size: Annotated[int | None, Query(ge=1, le=1000)] = None,
):
    """Execute every agency deletion whose grace period has elapsed. Call from cron."""
    result = await sweep(batch_size=batch_size or get_settings().deletion_sweep_batch_size)
    return DeletionSweepResponse.model_validate(result)
