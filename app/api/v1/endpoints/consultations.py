"""Consultations API: CRUD, auto-saved draft, completion and version history."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_caller,
    get_consultation_service,
    get_consultation_service_for_write,
    get_writable_caller,
)
from app.application.dtos.caller import CallerContext
from app.application.use_cases import ConsultationService
from app.core.limiter import limit_writes
from app.domain.enums import ConsultationStatus
from app.schemas.consultation import (
    ConsultationCompleteRequest,
    ConsultationDraftRequest,
    ConsultationDraftResponse,
    ConsultationFields,
    ConsultationResponse,
    ConsultationVersionResponse,
)

router = APIRouter()

_LIST_FIELDS = ("primary_challenges", "primary_goals", "design_styles", "admired_websites")


def _field_values(body: ConsultationFields) -> dict[str, Any]:
    """Fields present in the body; an explicit null on a list field clears it."""
    values = body.model_dump(exclude_unset=True)
    for name in _LIST_FIELDS:
        if name in values and values[name] is None:
            values[name] = []
    return values


@router.get("", response_model=list[ConsultationResponse])
async def list_consultations(
    caller: Annotated[CallerContext, Depends(get_caller)],
    consultation_svc: Annotated[ConsultationService, Depends(get_consultation_service)],
    status: ConsultationStatus | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Most recently updated first. Members without view_all see only their own."""
    consultations = await consultation_svc.list_consultations(
        caller, status=status, limit=limit, offset=offset
    )
    return [ConsultationResponse.model_validate(c) for c in consultations]


@router.post("", response_model=ConsultationResponse, status_code=201)
@limit_writes
async def create_consultation(
    request: Request,
    body: ConsultationFields,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    consultation_svc: Annotated[
        ConsultationService, Depends(get_consultation_service_for_write)
    ],
):
    created = await consultation_svc.create_consultation(caller, _field_values(body))
    return ConsultationResponse.model_validate(created)


@router.get("/{consultation_id}", response_model=ConsultationResponse)
async def get_consultation(
    consultation_id: str,
    caller: Annotated[CallerContext, Depends(get_caller)],
    consultation_svc: Annotated[ConsultationService, Depends(get_consultation_service)],
):
    consultation = await consultation_svc.get_consultation(caller, consultation_id)
    return ConsultationResponse.model_validate(consultation)


@router.patch("/{consultation_id}", response_model=ConsultationResponse)
@limit_writes
async def update_consultation(
    request: Request,
    consultation_id: str,
    body: ConsultationFields,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    consultation_svc: Annotated[
        ConsultationService, Depends(get_consultation_service_for_write)
    ],
):
    updated = await consultation_svc.update_consultation(
        caller, consultation_id, _field_values(body)
    )
    return ConsultationResponse.model_validate(updated)


@router.delete("/{consultation_id}", status_code=204)
@limit_writes
async def delete_consultation(
    request: Request,
    consultation_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    consultation_svc: Annotated[
        ConsultationService, Depends(get_consultation_service_for_write)
    ],
):
    """Delete the consultation with its draft and versions."""
    await consultation_svc.delete_consultation(caller, consultation_id)


@router.get("/{consultation_id}/draft", response_model=ConsultationDraftResponse | None)
async def get_consultation_draft(
    consultation_id: str,
    caller: Annotated[CallerContext, Depends(get_caller)],
    consultation_svc: Annotated[ConsultationService, Depends(get_consultation_service)],
):
    """The auto-saved draft, or null when none exists."""
    draft = await consultation_svc.get_draft(caller, consultation_id)
    return ConsultationDraftResponse.model_validate(draft) if draft else None


@router.put("/{consultation_id}/draft", response_model=ConsultationDraftResponse)
@limit_writes
async def save_consultation_draft(
    request: Request,
    consultation_id: str,
    body: ConsultationDraftRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    consultation_svc: Annotated[
        ConsultationService, Depends(get_consultation_service_for_write)
    ],
):
    draft = await consultation_svc.save_draft(
        caller, consultation_id, body.model_dump(exclude_none=True)
    )
    return ConsultationDraftResponse.model_validate(draft)


@router.post(
    "/{consultation_id}/complete",
    response_model=ConsultationVersionResponse,
    status_code=201,
)
@limit_writes
async def complete_consultation(
    request: Request,
    consultation_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    consultation_svc: Annotated[
        ConsultationService, Depends(get_consultation_service_for_write)
    ],
    body: ConsultationCompleteRequest | None = None,
):
    """Mark completed and snapshot as the next version; the draft is discarded."""
    version = await consultation_svc.complete_consultation(
        caller, consultation_id, change_summary=body.change_summary if body else None
    )
    return ConsultationVersionResponse.model_validate(version)


@router.get(
    "/{consultation_id}/versions", response_model=list[ConsultationVersionResponse]
)
async def list_consultation_versions(
    consultation_id: str,
    caller: Annotated[CallerContext, Depends(get_caller)],
    consultation_svc: Annotated[ConsultationService, Depends(get_consultation_service)],
):
    versions = await consultation_svc.list_versions(caller, consultation_id)
    return [ConsultationVersionResponse.model_validate(v) for v in versions]
