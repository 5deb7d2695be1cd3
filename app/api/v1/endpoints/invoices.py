"""Invoices API: CRUD on drafts, send, record payment, cancel, overdue sweep."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_caller,
    get_invoice_service,
    get_invoice_service_for_write,
    get_writable_caller,
)
from app.application.dtos.caller import CallerContext
from app.application.dtos.invoice import InvoiceCreate, LineItemInput, PaymentRecord
from app.application.use_cases import InvoiceService
from app.core.limiter import limit_writes
from app.domain.enums import InvoiceStatus
from app.schemas.invoice import (
    InvoiceCancelRequest,
    InvoiceCreateRequest,
    InvoiceResponse,
    InvoiceUpdateRequest,
    LineItemRequest,
    MarkOverdueResponse,
    PaymentRecordRequest,
)

router = APIRouter()


def _line_items(items: list[LineItemRequest]) -> list[LineItemInput]:
    return [
        LineItemInput(description=i.description, quantity=i.quantity, unit_price=i.unit_price)
        for i in items
    ]


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    caller: Annotated[CallerContext, Depends(get_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service)],
    status: InvoiceStatus | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Newest issue date first."""
    invoices = await invoice_svc.list_invoices(caller, status=status, limit=limit, offset=offset)
    return [InvoiceResponse.model_validate(i) for i in invoices]


@router.post("", response_model=InvoiceResponse, status_code=201)
@limit_writes
async def create_invoice(
    request: Request,
    body: InvoiceCreateRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
):
    """Create a draft invoice; number, slug and totals are assigned server-side."""
    created = await invoice_svc.create_invoice(
        caller,
        InvoiceCreate(
            client_business_name=body.client_business_name,
            line_items=_line_items(body.line_items),
            issue_date=body.issue_date,
            due_date=body.due_date,
            discount_amount=body.discount_amount,
            client_contact_name=body.client_contact_name,
            client_email=body.client_email,
            client_address=body.client_address,
            consultation_id=body.consultation_id,
            notes=body.notes,
        ),
    )
    return InvoiceResponse.model_validate(created)


@router.post("/mark-overdue", response_model=MarkOverdueResponse)
@limit_writes
async def mark_overdue_invoices(
    request: Request,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
):
    """Move sent and viewed invoices past their due date to overdue."""
    return MarkOverdueResponse(updated=await invoice_svc.mark_overdue(caller))


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service)],
):
    return InvoiceResponse.model_validate(await invoice_svc.get_invoice(caller, invoice_id))


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
@limit_writes
async def update_invoice(
    request: Request,
    invoice_id: str,
    body: InvoiceUpdateRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
):
    """Edit a draft; totals are recomputed when line items or discount change."""
    changes = body.model_dump(exclude_unset=True)
    if body.line_items is not None:
        changes["line_items"] = _line_items(body.line_items)
    updated = await invoice_svc.update_invoice(caller, invoice_id, changes)
    return InvoiceResponse.model_validate(updated)


@router.delete("/{invoice_id}", status_code=204)
@limit_writes
async def delete_invoice(
    request: Request,
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
):
    """Only drafts can be deleted."""
    await invoice_svc.delete_invoice(caller, invoice_id)


@router.post("/{invoice_id}/send", response_model=InvoiceResponse)
@limit_writes
async def send_invoice(
    request: Request,
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
):
    return InvoiceResponse.model_validate(await invoice_svc.send_invoice(caller, invoice_id))


@router.post("/{invoice_id}/payments", response_model=InvoiceResponse)
@limit_writes
async def record_invoice_payment(
    request: Request,
    invoice_id: str,
    body: PaymentRecordRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
):
    """Record a manual payment and mark the invoice paid."""
    paid = await invoice_svc.record_payment(
        caller,
        invoice_id,
        PaymentRecord(
            payment_method=body.payment_method,
            payment_reference=body.payment_reference,
            paid_at=body.paid_at,
        ),
    )
    return InvoiceResponse.model_validate(paid)


@router.post("/{invoice_id}/cancel", response_model=InvoiceResponse)
@limit_writes
async def cancel_invoice(
    request: Request,
    invoice_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    invoice_svc: Annotated[InvoiceService, Depends(get_invoice_service_for_write)],
    body: InvoiceCancelRequest | None = None,
):
    """Cancel and deactivate the payment link; provider errors do not block the cancel."""
    cancelled = await invoice_svc.cancel_invoice(
        caller, invoice_id, reason=body.reason if body else None
    )
    return InvoiceResponse.model_validate(cancelled)
