"""Payments API: Stripe Connect status and invoice payment links."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_caller,
    get_payment_link_service,
    get_payment_link_service_for_write,
    get_stripe_connection_service,
    get_stripe_connection_service_for_write,
    get_writable_caller,
)
from app.application.dtos.caller import CallerContext
from app.application.use_cases import PaymentLinkService, StripeConnectionService
from app.core.limiter import limit_payment_links, limit_writes
from app.schemas.payment import (
    PaymentLinkDisableResponse,
    PaymentLinkResponse,
    StripeStatusResponse,
)

router = APIRouter()


@router.get("/stripe/status", response_model=StripeStatusResponse)
async def get_stripe_status(
    caller: Annotated[CallerContext, Depends(get_caller)],
    connection_svc: Annotated[
        StripeConnectionService, Depends(get_stripe_connection_service)
    ],
):
    """Stored connection status; does not call Stripe."""
    return StripeStatusResponse.model_validate(
        await connection_svc.get_connection_status(caller)
    )


@router.post("/stripe/refresh", response_model=StripeStatusResponse)
@limit_writes
async def refresh_stripe_status(
    request: Request,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    connection_svc: Annotated[
        StripeConnectionService, Depends(get_stripe_connection_service_for_write)
    ],
):
    """Re-read the connected account from Stripe and store its capability flags."""
    return StripeStatusResponse.model_validate(await connection_svc.refresh_status(caller))


@router.post("/stripe/disconnect", response_model=StripeStatusResponse)
@limit_writes
async def disconnect_stripe(
    request: Request,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    connection_svc: Annotated[
        StripeConnectionService, Depends(get_stripe_connection_service_for_write)
    ],
):
    """Forget the connected account and clear every invoice's payment link."""
    return StripeStatusResponse.model_validate(await connection_svc.disconnect(caller))


@router.get("/invoices/{invoice_id}/link", response_model=PaymentLinkResponse)
async def get_payment_link(
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_caller)],
    link_svc: Annotated[PaymentLinkService, Depends(get_payment_link_service)],
):
    return PaymentLinkResponse.model_validate(await link_svc.get_link(caller, invoice_id))


@router.post("/invoices/{invoice_id}/link", response_model=PaymentLinkResponse)
@limit_payment_links
async def create_payment_link(
    request: Request,
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    link_svc: Annotated[PaymentLinkService, Depends(get_payment_link_service_for_write)],
):
    """Create the invoice's payment link, or return the existing one."""
    link = await link_svc.create_link(caller, invoice_id)
    return PaymentLinkResponse.model_validate(link)


@router.delete("/invoices/{invoice_id}/link", response_model=PaymentLinkDisableResponse)
@limit_writes
async def disable_payment_link(
    request: Request,
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    link_svc: Annotated[PaymentLinkService, Depends(get_payment_link_service_for_write)],
):
    return PaymentLinkDisableResponse(success=await link_svc.disable_link(caller, invoice_id))
