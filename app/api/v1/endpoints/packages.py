"""Service packages API: CRUD, reorder, duplicate."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_caller,
    get_package_service,
    get_package_service_for_write,
    get_writable_caller,
)
from app.application.dtos.caller import CallerContext
from app.application.dtos.package import PackageCreate
from app.application.use_cases import PackageService
from app.core.limiter import limit_writes
from app.schemas.package import (
    PackageCreateRequest,
    PackageReorderRequest,
    PackageResponse,
    PackageUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[PackageResponse])
async def list_packages(
    caller: Annotated[CallerContext, Depends(get_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service)],
    active_only: Annotated[bool, Query(description="Only packages offered to clients")] = False,
):
    packages = await package_svc.list_packages(caller, active_only=active_only)
    return [PackageResponse.model_validate(p) for p in packages]


@router.post("", response_model=PackageResponse, status_code=201)
@limit_writes
async def create_package(
    request: Request,
    body: PackageCreateRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service_for_write)],
):
    created = await package_svc.create_package(caller, PackageCreate(**body.model_dump()))
    return PackageResponse.model_validate(created)


@router.post("/reorder", status_code=204)
@limit_writes
async def reorder_packages(
    request: Request,
    body: PackageReorderRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service_for_write)],
):
    """Set display order to each id's position in the list."""
    await package_svc.reorder_packages(caller, body.package_ids)


@router.get("/{package_id}", response_model=PackageResponse)
async def get_package(
    package_id: str,
    caller: Annotated[CallerContext, Depends(get_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service)],
):
    return PackageResponse.model_validate(await package_svc.get_package(caller, package_id))


@router.patch("/{package_id}", response_model=PackageResponse)
@limit_writes
async def update_package(
    request: Request,
    package_id: str,
    body: PackageUpdateRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service_for_write)],
):
    updated = await package_svc.update_package(
        caller, package_id, body.model_dump(exclude_unset=True)
    )
    return PackageResponse.model_validate(updated)


@router.delete("/{package_id}", status_code=204)
@limit_writes
async def delete_package(
    request: Request,
    package_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service_for_write)],
):
    """Soft delete: the package is deactivated, not removed."""
    await package_svc.delete_package(caller, package_id)


@router.post("/{package_id}/duplicate", response_model=PackageResponse, status_code=201)
@limit_writes
async def duplicate_package(
    request: Request,
    package_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    package_svc: Annotated[PackageService, Depends(get_package_service_for_write)],
):
    """Copy as "<name> (Copy)"; the copy starts inactive."""
    duplicate = await package_svc.duplicate_package(caller, package_id)
    return PackageResponse.model_validate(duplicate)
