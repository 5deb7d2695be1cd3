"""GDPR API: data export (agency and personal) and the agency deletion lifecycle."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import (
    get_agency_export_service,
    get_caller,
    get_current_user_id,
    get_deletion_service,
    get_deletion_service_for_write,
    get_user_export_service,
)
from app.application.dtos.caller import CallerContext
from app.application.use_cases import (
    AgencyDeletionService,
    AgencyExportService,
    UserExportService,
)
from app.core.limiter import limit_sensitive
from app.schemas.gdpr import DeletionScheduleRequest, DeletionStatusResponse
from app.shared.utils.datetime import utc_now

router = APIRouter()


def _attachment(data: dict, filename: str) -> JSONResponse:
    return JSONResponse(
        content=data,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


@router.get("/export")
@limit_sensitive
async def export_agency_data(
    request: Request,
    caller: Annotated[CallerContext, Depends(get_caller)],
    export_svc: Annotated[AgencyExportService, Depends(get_agency_export_service)],
):
    """Full agency export as camelCase JSON (requires data:export)."""
    data = await export_svc.export_agency_data(caller)
    slug = data["agency"]["slug"]
    return _attachment(data, f"{slug}-export-{utc_now().date().isoformat()}.json")


@router.get("/export/me")
@limit_sensitive
async def export_my_data(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    export_svc: Annotated[UserExportService, Depends(get_user_export_service)],
):
    """The caller's personal data across every agency. No tenant header needed."""
    data = await export_svc.export_user_data(user_id)
    return _attachment(data, f"my-data-export-{utc_now().date().isoformat()}.json")


@router.get("/deletion", response_model=DeletionStatusResponse)
async def get_deletion_status(
    caller: Annotated[CallerContext, Depends(get_caller)],
    deletion_svc: Annotated[AgencyDeletionService, Depends(get_deletion_service)],
):
    return DeletionStatusResponse.model_validate(
        await deletion_svc.get_deletion_status(caller)
    )


@router.post("/deletion", response_model=DeletionStatusResponse)
@limit_sensitive
async def schedule_agency_deletion(
    request: Request,
    body: DeletionScheduleRequest,
    caller: Annotated[CallerContext, Depends(get_caller)],
    deletion_svc: Annotated[AgencyDeletionService, Depends(get_deletion_service_for_write)],
):
    """Schedule deletion after the grace period. Body must carry "delete <agency name>"."""
    status = await deletion_svc.schedule(caller, body.confirmation_phrase)
    return DeletionStatusResponse.model_validate(status)


@router.delete("/deletion", response_model=DeletionStatusResponse)
@limit_sensitive
async def cancel_agency_deletion(
    request: Request,
    caller: Annotated[CallerContext, Depends(get_caller)],
    deletion_svc: Annotated[AgencyDeletionService, Depends(get_deletion_service_for_write)],
):
    """Cancel a scheduled deletion while the grace period is still running."""
    return DeletionStatusResponse.model_validate(await deletion_svc.cancel(caller))
