"""Invoice operations: create, read, edit drafts, send, record payment, cancel, delete, overdue sweep."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from app.application.dtos.invoice import (
    InvoiceCreate,
    InvoiceLineItem,
    InvoiceResult,
    LineItemInput,
    PaymentRecord,
)
from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.enums import EntityType, InvoiceStatus
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.money import is_valid_money, to_decimal, to_money_str
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_public_slug

if TYPE_CHECKING:
    from app.application.dtos.agency import AgencyProfileResult
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IAgencyProfileRepository,
        IInvoiceRepository,
    )
    from app.application.interfaces.services import IQueryCache
    from app.application.use_cases.payments.payment_operations import PaymentLinkService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "client_business_name",
        "client_contact_name",
        "client_email",
        "client_address",
        "consultation_id",
        "notes",
        "issue_date",
        "due_date",
        "line_items",
        "discount_amount",
    }
)
_NOT_PAYABLE = frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED, InvoiceStatus.REFUNDED})


@dataclass(frozen=True)
class InvoiceTotals:
    line_items: list[InvoiceLineItem]
    subtotal: Decimal
    discount_amount: Decimal
    gst_amount: Decimal
    total: Decimal


def format_invoice_number(prefix: str, number: int) -> str:
    return f"{prefix}-{number:04d}"


def calculate_totals(
    line_items: list[LineItemInput],
    discount_amount: str,
    *,
    gst_registered: bool,
    gst_rate: Decimal,
) -> InvoiceTotals:
    """Compute line amounts and totals.

    GST is charged on the line-item subtotal when the agency is registered;
    total = subtotal - discount + GST. Every amount is rounded to cents.
    """
    if not line_items:
        raise ValidationException("An invoice needs at least one line item", field="line_items")
    if not is_valid_money(discount_amount):
        raise ValidationException("Invalid discount amount", field="discount_amount")
    computed: list[InvoiceLineItem] = []
    subtotal = Decimal("0")
    for index, item in enumerate(line_items):
        if not item.description.strip():
            raise ValidationException(
                f"Line item {index + 1} needs a description", field="line_items"
            )
        try:
            quantity = Decimal(item.quantity)
        except InvalidOperation as e:
            raise ValidationException(
                f"Line item {index + 1} has an invalid quantity", field="line_items"
            ) from e
        if quantity <= 0 or not is_valid_money(item.unit_price):
            raise ValidationException(
                f"Line item {index + 1} needs a positive quantity and a valid unit price",
                field="line_items",
            )
        amount = to_decimal(quantity * Decimal(item.unit_price))
        subtotal += amount
        computed.append(
            InvoiceLineItem(
                description=item.description.strip(),
                quantity=str(quantity),
                unit_price=to_money_str(Decimal(item.unit_price)),
                amount=to_money_str(amount),
            )
        )
    subtotal = to_decimal(subtotal)
    discount = to_decimal(discount_amount)
    if discount > subtotal:
        raise ValidationException("Discount cannot exceed the subtotal", field="discount_amount")
    gst = to_decimal(subtotal * gst_rate / 100) if gst_registered else to_decimal(0)
    return InvoiceTotals(
        line_items=computed,
        subtotal=subtotal,
        discount_amount=discount,
        gst_amount=gst,
        total=to_decimal(subtotal - discount + gst),
    )


def _totals_values(totals: InvoiceTotals) -> dict[str, Any]:
    return {
        "line_items": [asdict(item) for item in totals.line_items],
        "subtotal": totals.subtotal,
        "discount_amount": totals.discount_amount,
        "gst_amount": totals.gst_amount,
        "total": totals.total,
    }


class InvoiceService:
    """Invoices of the caller's agency. Commands invalidate INVOICE queries."""

    def __init__(
        self,
        invoice_repo: IInvoiceRepository,
        profile_repo: IAgencyProfileRepository,
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
        payment_links: PaymentLinkService | None = None,
    ) -> None:
        self.invoice_repo = invoice_repo
        self.profile_repo = profile_repo
        self.activity_repo = activity_repo
        self.cache = cache
        self.payment_links = payment_links

    def _changed(self) -> None:
        invalidate_entities(self.cache, {EntityType.INVOICE})

    async def _get(self, invoice_id: str) -> InvoiceResult:
        invoice = await self.invoice_repo.get(invoice_id)
        if invoice is None:
            raise ResourceNotFoundException("invoice", invoice_id)
        return invoice

    async def _profile(self) -> AgencyProfileResult:
        profile = await self.profile_repo.get()
        if profile is None:
            profile = await self.profile_repo.create_default()
        return profile

    async def _set_status(
        self, caller: CallerContext, invoice: InvoiceResult, action: str, changes: dict[str, Any]
    ) -> InvoiceResult:
        updated = await self.invoice_repo.update_invoice(invoice.id, changes)
        if updated is None:
            raise ResourceNotFoundException("invoice", invoice.id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            action,
            EntityType.INVOICE.value,
            invoice.id,
            old_values={"status": invoice.status.value},
            new_values={"status": updated.status.value},
        )
        return updated

    async def create_invoice(self, caller: CallerContext, data: InvoiceCreate) -> InvoiceResult:
        """Create a draft invoice numbered <prefix>-<nnnn> from the agency profile."""
        require(caller.role, "invoice:create")
        if not data.client_business_name.strip():
            raise ValidationException("Client business name is required", field="client_business_name")
        profile = await self._profile()
        totals = calculate_totals(
            data.line_items,
            data.discount_amount,
            gst_registered=profile.gst_registered,
            gst_rate=profile.gst_rate,
        )
        issue_date = data.issue_date or utc_now().date()
        due_date = data.due_date or issue_date + timedelta(days=profile.default_payment_terms_days)
        if due_date < issue_date:
            raise ValidationException("Due date cannot be before the issue date", field="due_date")
        prefix, number = await self.profile_repo.reserve_invoice_number()
        invoice = await self.invoice_repo.create_invoice(
            {
                "invoice_number": format_invoice_number(prefix, number),
                "slug": generate_public_slug(),
                "status": InvoiceStatus.DRAFT.value,
                "consultation_id": data.consultation_id,
                "client_business_name": data.client_business_name.strip(),
                "client_contact_name": data.client_contact_name,
                "client_email": data.client_email,
                "client_address": data.client_address,
                "issue_date": issue_date,
                "due_date": due_date,
                "notes": data.notes,
                "created_by": caller.user_id,
                **_totals_values(totals),
            }
        )
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "invoice.created",
            EntityType.INVOICE.value,
            invoice.id,
            new_values={"invoice_number": invoice.invoice_number, "total": invoice.total},
        )
        return invoice

    @cached_query("invoice.get")
    async def get_invoice(self, caller: CallerContext, invoice_id: str) -> InvoiceResult:
        require(caller.role, "invoice:view")
        return await self._get(invoice_id)

    @cached_query("invoice.list")
    async def list_invoices(
        self,
        caller: CallerContext,
        *,
        status: InvoiceStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[InvoiceResult]:
        require(caller.role, "invoice:view")
        return await self.invoice_repo.list_invoices(status=status, limit=limit, offset=offset)

    async def update_invoice(
        self, caller: CallerContext, invoice_id: str, changes: dict[str, Any]
    ) -> InvoiceResult:
        """Edit a draft. Totals are recomputed when line items or discount change."""
        require(caller.role, "invoice:edit")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown invoice fields: {', '.join(sorted(unknown))}")
        invoice = await self._get(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT:
            raise ConflictException("Only draft invoices can be edited", status=invoice.status.value)
        values = {k: v for k, v in changes.items() if k not in ("line_items", "discount_amount")}
        if "line_items" in changes or "discount_amount" in changes:
            line_items = changes.get("line_items")
            if line_items is None:
                line_items = [
                    LineItemInput(i.description, i.quantity, i.unit_price) for i in invoice.line_items
                ]
            profile = await self._profile()
            totals = calculate_totals(
                line_items,
                changes.get("discount_amount") or invoice.discount_amount,
                gst_registered=profile.gst_registered,
                gst_rate=profile.gst_rate,
            )
            values.update(_totals_values(totals))
        issue_date: date = values.get("issue_date") or invoice.issue_date
        due_date: date = values.get("due_date") or invoice.due_date
        if due_date < issue_date:
            raise ValidationException("Due date cannot be before the issue date", field="due_date")
        if not values:
            return invoice
        updated = await self.invoice_repo.update_invoice(invoice_id, values)
        if updated is None:
            raise ResourceNotFoundException("invoice", invoice_id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "invoice.updated",
            EntityType.INVOICE.value,
            invoice_id,
            new_values={"fields": sorted(changes)},
        )
        return updated

    async def send_invoice(self, caller: CallerContext, invoice_id: str) -> InvoiceResult:
        require(caller.role, "invoice:send")
        invoice = await self._get(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT:
            raise ConflictException("Only draft invoices can be sent", status=invoice.status.value)
        return await self._set_status(
            caller,
            invoice,
            "invoice.sent",
            {"status": InvoiceStatus.SENT.value, "sent_at": utc_now()},
        )

    async def record_payment(
        self, caller: CallerContext, invoice_id: str, payment: PaymentRecord
    ) -> InvoiceResult:
        require(caller.role, "invoice:record_payment")
        invoice = await self._get(invoice_id)
        if invoice.status == InvoiceStatus.PAID:
            raise ConflictException("Invoice is already paid", status=invoice.status.value)
        if invoice.status in _NOT_PAYABLE:
            raise ConflictException(
                f"Cannot record a payment on a {invoice.status.value} invoice",
                status=invoice.status.value,
            )
        return await self._set_status(
            caller,
            invoice,
            "invoice.paid",
            {
                "status": InvoiceStatus.PAID.value,
                "paid_at": payment.paid_at or utc_now(),
                "payment_method": payment.payment_method,
                "payment_reference": payment.payment_reference,
            },
        )

    async def cancel_invoice(
        self, caller: CallerContext, invoice_id: str, reason: str | None = None
    ) -> InvoiceResult:
        """Cancel and deactivate any payment link; provider errors do not block the cancel."""
        require(caller.role, "invoice:cancel")
        invoice = await self._get(invoice_id)
        if invoice.status == InvoiceStatus.PAID:
            raise ConflictException(
                "Cannot cancel a paid invoice. Use refund instead.", status=invoice.status.value
            )
        if invoice.status == InvoiceStatus.CANCELLED:
            raise ConflictException("Invoice is already cancelled", status=invoice.status.value)
        if self.payment_links is not None and invoice.stripe_payment_link_id:
            await self.payment_links.disable_link(caller, invoice_id)
        changes: dict[str, Any] = {"status": InvoiceStatus.CANCELLED.value}
        if reason:
            notes = f"{invoice.notes}\n\n" if invoice.notes else ""
            changes["notes"] = f"{notes}Cancellation reason: {reason}"
        return await self._set_status(caller, invoice, "invoice.cancelled", changes)

    async def delete_invoice(self, caller: CallerContext, invoice_id: str) -> None:
        require(caller.role, "invoice:delete")
        invoice = await self._get(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT:
            raise ConflictException("Only draft invoices can be deleted", status=invoice.status.value)
        await self.invoice_repo.delete_invoice(invoice_id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "invoice.deleted",
            EntityType.INVOICE.value,
            invoice_id,
            old_values={"invoice_number": invoice.invoice_number},
        )

    async def mark_overdue(self, caller: CallerContext) -> int:
        """Move sent/viewed invoices past their due date to overdue. Returns the count."""
        require(caller.role, "invoice:edit")
        count = await self.invoice_repo.mark_overdue(utc_now().date())
        if count:
            self._changed()
            logger.info("Marked %s invoices overdue for agency %s", count, caller.agency_id)
        return count
