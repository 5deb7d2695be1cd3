"""Agency API: create an agency, read and update the current one, slug availability."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_agency_service,
    get_agency_service_for_write,
    get_caller,
    get_current_user_id,
    get_writable_caller,
)
from app.application.dtos.agency import AgencyCreate, AgencyUpdate
from app.application.dtos.caller import CallerContext
from app.application.use_cases import AgencyService
from app.core.limiter import limit_writes
from app.schemas.agency import (
    AgencyCreateRequest,
    AgencyResponse,
    AgencyUpdateRequest,
    SlugAvailabilityResponse,
)

router = APIRouter()


@router.post("", response_model=AgencyResponse, status_code=201)
@limit_writes
async def create_agency(
    request: Request,
    body: AgencyCreateRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    agency_svc: Annotated[AgencyService, Depends(get_agency_service_for_write)],
):
    """Create an agency owned by the authenticated user. No tenant header needed."""
    created = await agency_svc.create_agency(
        user_id,
        AgencyCreate(
            name=body.name,
            email=body.email,
            phone=body.phone,
            website=body.website,
            slug=body.slug,
        ),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return AgencyResponse.model_validate(created)


@router.get("/slug-availability", response_model=SlugAvailabilityResponse)
async def check_slug_availability(
    slug: Annotated[str, Query(min_length=1, max_length=100)],
    _: Annotated[str, Depends(get_current_user_id)],
    agency_svc: Annotated[AgencyService, Depends(get_agency_service)],
):
    normalized = slug.strip().lower()
    available = await agency_svc.check_slug_available(normalized)
    return SlugAvailabilityResponse(slug=normalized, available=available)


@router.get("/current", response_model=AgencyResponse)
async def get_current_agency(
    caller: Annotated[CallerContext, Depends(get_caller)],
    agency_svc: Annotated[AgencyService, Depends(get_agency_service)],
):
    return AgencyResponse.model_validate(await agency_svc.get_current_agency(caller))


@router.patch("/current", response_model=AgencyResponse)
@limit_writes
async def update_current_agency(
    request: Request,
    body: AgencyUpdateRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    agency_svc: Annotated[AgencyService, Depends(get_agency_service_for_write)],
):
    """Update details and branding; fields left out of the body are kept."""
    updated = await agency_svc.update_agency(
        caller, AgencyUpdate(**body.model_dump(exclude_none=True))
    )
    return AgencyResponse.model_validate(updated)
