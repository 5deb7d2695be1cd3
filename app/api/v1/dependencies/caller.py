"""Caller resolution: bearer token + X-Tenant-ID header -> CallerContext.

The role is read from the membership row on every request; nothing about the
caller is cached across requests.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.agency import AgencyResult
from app.application.dtos.caller import CallerContext
from app.core.config import get_settings
from app.core.tenant_validation import is_valid_tenant_id_format
from app.domain.enums import MembershipStatus
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import (
    AgencyRepository,
    MembershipRepository,
)
from app.infrastructure.security.jwt import token_subject, verify_token
from app.shared.utils.datetime import utc_now

_http_bearer = HTTPBearer(auto_error=False)

_USER_AGENT_MAX_LENGTH = 512


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


async def get_current_user_id_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Return the user id (sub) from the bearer token if present and valid; else None."""
    if not credentials:
        return None
    try:
        return token_subject(verify_token(credentials.credentials))
    except ValueError:
        return None


async def get_current_user_id(
    user_id: Annotated[str | None, Depends(get_current_user_id_optional)],
) -> str:
    """Return the authenticated user id; raise 401 if missing or invalid."""
    if user_id is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_tenant_id(request: Request) -> str:
    """Read and validate the agency id from the tenant header (400 when missing or malformed)."""
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not is_valid_tenant_id_format(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid tenant ID format (use alphanumeric, hyphen, underscore; max 64 characters)",
        )
    return value


async def get_current_agency(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AgencyResult:
    """The agency named by the tenant header; 404 when unknown or already deleted."""
    agency = await AgencyRepository(db).get_by_id(tenant_id)
    if agency is None or agency.deleted_at is not None:
        raise HTTPException(status_code=404, detail="Agency not found")
    return agency


async def get_caller(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    agency: Annotated[AgencyResult, Depends(get_current_agency)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CallerContext:
    """Build the CallerContext from the token and the caller's active membership.

    A caller with no membership in the agency gets the same 404 as an unknown
    agency; an invited or suspended member gets 403.
    """
    membership = await MembershipRepository(db).get_for_user(user_id, agency.id)
    if membership is None:
        raise HTTPException(status_code=404, detail="Agency not found")
    if membership.status != MembershipStatus.ACTIVE:
        raise HTTPException(status_code=403, detail="Membership is not active")
    user_agent = request.headers.get("user-agent")
    return CallerContext(
        agency_id=agency.id,
        user_id=user_id,
        role=membership.role,
        membership_id=membership.id,
        ip_address=_client_ip(request),
        user_agent=user_agent[:_USER_AGENT_MAX_LENGTH] if user_agent else None,
    )


async def get_writable_caller(
    caller: Annotated[CallerContext, Depends(get_caller)],
    agency: Annotated[AgencyResult, Depends(get_current_agency)],
) -> CallerContext:
    """CallerContext for mutating routes; 409 once the agency's grace period has elapsed."""
    agency.to_entity().ensure_writable(utc_now())
    return caller
