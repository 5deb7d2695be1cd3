from app.application.use_cases.invoices.invoice_operations import (
    InvoiceService,
    InvoiceTotals,
    calculate_totals,
    format_invoice_number,
)

__all__ = [
    "InvoiceService",
    "InvoiceTotals",
    "calculate_totals",
    "format_invoice_number",
]
