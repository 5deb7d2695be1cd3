"""Invoice repository. Returns application DTOs with money as strings. Agency-scoped."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.invoice import InvoiceLineItem, InvoiceResult
from app.domain.enums import InvoiceStatus
from app.domain.exceptions import ConflictException
from app.domain.value_objects.money import to_money_str
from app.infrastructure.persistence.models.invoice import Invoice
from app.infrastructure.persistence.repositories.base import AgencyScopedRepository
from app.shared.utils.datetime import ensure_utc

_OVERDUE_FROM = (InvoiceStatus.SENT.value, InvoiceStatus.VIEWED.value)


def _invoice_to_result(i: Invoice) -> InvoiceResult:
    return InvoiceResult(
        id=i.id,
        agency_id=i.agency_id,
        invoice_number=i.invoice_number,
        slug=i.slug,
        status=InvoiceStatus(i.status),
        client_business_name=i.client_business_name,
        issue_date=i.issue_date,
        due_date=i.due_date,
        subtotal=to_money_str(i.subtotal),
        discount_amount=to_money_str(i.discount_amount),
        gst_amount=to_money_str(i.gst_amount),
        total=to_money_str(i.total),
        line_items=[InvoiceLineItem(**item) for item in i.line_items or []],
        client_contact_name=i.client_contact_name,
        client_email=i.client_email,
        client_address=i.client_address,
        consultation_id=i.consultation_id,
        notes=i.notes,
        sent_at=ensure_utc(i.sent_at),
        viewed_at=ensure_utc(i.viewed_at),
        paid_at=ensure_utc(i.paid_at),
        payment_method=i.payment_method,
        payment_reference=i.payment_reference,
        stripe_payment_link_id=i.stripe_payment_link_id,
        stripe_payment_link_url=i.stripe_payment_link_url,
        created_by=i.created_by,
        created_at=ensure_utc(i.created_at),
    )


class InvoiceRepository(AgencyScopedRepository[Invoice]):
    """Invoices of one agency. invoice_number is unique per agency."""

    def __init__(self, db: AsyncSession, agency_id: str) -> None:
        super().__init__(db, Invoice, agency_id)

    async def get(self, invoice_id: str) -> InvoiceResult | None:
        row = await self.get_by_id(invoice_id)
        return _invoice_to_result(row) if row else None

    async def list_invoices(
        self, *, status: InvoiceStatus | None = None, limit: int = 50, offset: int = 0
    ) -> list[InvoiceResult]:
        """Newest issue date first."""
        stmt = self._scoped()
        if status is not None:
            stmt = stmt.where(Invoice.status == status.value)
        result = await self.db.execute(
            stmt.order_by(Invoice.issue_date.desc(), Invoice.invoice_number.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_invoice_to_result(i) for i in result.scalars().all()]

    async def create_invoice(self, values: dict[str, Any]) -> InvoiceResult:
        invoice = Invoice(agency_id=self.agency_id, **values)
        try:
            created = await self.create(invoice)
        except IntegrityError as e:
            raise ConflictException(
                "Invoice number already in use", invoice_number=values.get("invoice_number")
            ) from e
        return _invoice_to_result(created)

    async def update_invoice(
        self, invoice_id: str, changes: dict[str, Any]
    ) -> InvoiceResult | None:
        row = await self.get_by_id(invoice_id)
        if row is None:
            return None
        self._apply(row, changes)
        updated = await self.update(row)
        return _invoice_to_result(updated)

    async def delete_invoice(self, invoice_id: str) -> bool:
        row = await self.get_by_id(invoice_id)
        if row is None:
            return False
        await self.delete(row)
        return True

    async def clear_payment_links(self) -> int:
        """Null the payment link fields on every invoice of the agency; returns the count."""
        result = await self.db.execute(
            update(Invoice)
            .where(
                Invoice.agency_id == self.agency_id,
                or_(
                    Invoice.stripe_payment_link_id.is_not(None),
                    Invoice.stripe_payment_link_url.is_not(None),
                ),
            )
            .values(stripe_payment_link_id=None, stripe_payment_link_url=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def mark_overdue(self, today: date) -> int:
        result = await self.db.execute(
            update(Invoice)
            .where(
                Invoice.agency_id == self.agency_id,
                Invoice.status.in_(_OVERDUE_FROM),
                Invoice.due_date < today,
            )
            .values(status=InvoiceStatus.OVERDUE.value)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
