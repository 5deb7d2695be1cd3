"""Invoice API schemas. Totals are always computed server-side."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.enums import InvoiceStatus
from app.schemas.package import MONEY_PATTERN

_QUANTITY_PATTERN = r"^\d+(\.\d{1,4})?$"


class LineItemRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: str = Field(default="1", pattern=_QUANTITY_PATTERN)
    unit_price: str = Field(..., pattern=MONEY_PATTERN)


class InvoiceCreateRequest(BaseModel):
    client_business_name: str = Field(..., min_length=1, max_length=255)
    line_items: list[LineItemRequest] = Field(..., min_length=1)
    issue_date: date | None = None
    due_date: date | None = None
    discount_amount: str = Field(default="0.00", pattern=MONEY_PATTERN)
    client_contact_name: str | None = Field(default=None, max_length=255)
    client_email: EmailStr | None = None
    client_address: str | None = None
    consultation_id: str | None = None
    notes: str | None = None


class InvoiceUpdateRequest(BaseModel):
    """Partial update of a draft invoice."""

    client_business_name: str | None = Field(default=None, min_length=1, max_length=255)
    line_items: list[LineItemRequest] | None = Field(default=None, min_length=1)
    issue_date: date | None = None
    due_date: date | None = None
    discount_amount: str | None = Field(default=None, pattern=MONEY_PATTERN)
    client_contact_name: str | None = Field(default=None, max_length=255)
    client_email: EmailStr | None = None
    client_address: str | None = None
    consultation_id: str | None = None
    notes: str | None = None


class PaymentRecordRequest(BaseModel):
    payment_method: str = Field(..., min_length=1, max_length=50, description="e.g. bank_transfer, cash, stripe")
    payment_reference: str | None = Field(default=None, max_length=255)
    paid_at: datetime | None = None


class InvoiceCancelRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class LineItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    quantity: str
    unit_price: str
    amount: str


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    invoice_number: str
    slug: str
    status: InvoiceStatus
    client_business_name: str
    client_contact_name: str | None = None
    client_email: str | None = None
    client_address: str | None = None
    consultation_id: str | None = None
    issue_date: date
    due_date: date
    line_items: list[LineItemResponse]
    subtotal: str
    discount_amount: str
    gst_amount: str
    total: str
    notes: str | None = None
    sent_at: datetime | None = None
    viewed_at: datetime | None = None
    paid_at: datetime | None = None
    payment_method: str | None = None
    payment_reference: str | None = None
    stripe_payment_link_url: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class MarkOverdueResponse(BaseModel):
    updated: int
