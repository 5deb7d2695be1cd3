"""Invoice ORM model."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import InvoiceStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AgencyScopedModel,
    CreatedByMixin,
    status_check,
)


class Invoice(AgencyScopedModel, CreatedByMixin, Base):
    """Invoice. Unique (agency_id, invoice_number); slug is the public URL token."""

    __tablename__ = "invoice"

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvoiceStatus.DRAFT.value, index=True
    )
    consultation_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("consultation.id", ondelete="SET NULL"), nullable=True
    )

    client_business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)

    line_items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    gst_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    viewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    stripe_payment_link_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_payment_link_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("agency_id", "invoice_number", name="uq_invoice_agency_number"),
        status_check("status", InvoiceStatus.values(), "invoice_status_check"),
    )
