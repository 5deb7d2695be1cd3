"""Money amounts as decimal strings (e.g. '1500.00')."""

import re
from decimal import ROUND_HALF_UP, Decimal

_MONEY_RE = re.compile(r"^\d+(\.\d{1,2})?$")

ZERO = "0.00"


def is_valid_money(value: str) -> bool:
    """Return True for non-negative amounts with at most two decimal places."""
    return bool(_MONEY_RE.match(value))


def to_decimal(value: str | Decimal | int | float) -> Decimal:
    """Convert to a Decimal quantized to cents."""
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_money_str(value: Decimal) -> str:
    """Format a Decimal as a two-place money string."""
    return str(to_decimal(value))


def to_minor_units(value: str | Decimal) -> int:
    """Return the amount in cents (what payment providers expect)."""
    return int((to_decimal(value) * 100).to_integral_value(rounding=ROUND_HALF_UP))
