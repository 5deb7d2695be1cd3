"""DTOs for invoices."""

from dataclasses import dataclass, field
from datetime import date, datetime

from app.domain.enums import InvoiceStatus


@dataclass(frozen=True)
class InvoiceLineItem:
    description: str
    quantity: str
    unit_price: str
    amount: str


@dataclass(frozen=True)
class InvoiceResult:
    """Invoice read-model. Amounts are two-place decimal strings."""

    id: str
    agency_id: str
    invoice_number: str
    slug: str
    status: InvoiceStatus
    client_business_name: str
    issue_date: date
    due_date: date
    subtotal: str
    discount_amount: str
    gst_amount: str
    total: str
    line_items: list[InvoiceLineItem] = field(default_factory=list)
    client_contact_name: str | None = None
    client_email: str | None = None
    client_address: str | None = None
    consultation_id: str | None = None
    notes: str | None = None
    sent_at: datetime | None = None
    viewed_at: datetime | None = None
    paid_at: datetime | None = None
    payment_method: str | None = None
    payment_reference: str | None = None
    stripe_payment_link_id: str | None = None
    stripe_payment_link_url: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class LineItemInput:
    description: str
    quantity: str
    unit_price: str


@dataclass(frozen=True)
class InvoiceCreate:
    """Input for creating a draft invoice. Totals are computed server-side."""

    client_business_name: str
    line_items: list[LineItemInput]
    issue_date: date | None = None
    due_date: date | None = None
    discount_amount: str = "0.00"
    client_contact_name: str | None = None
    client_email: str | None = None
    client_address: str | None = None
    consultation_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PaymentRecord:
    payment_method: str
    payment_reference: str | None = None
    paid_at: datetime | None = None
