"""Domain value objects: slugs and money amounts."""

from app.domain.value_objects.money import is_valid_money, to_decimal, to_minor_units
from app.domain.value_objects.slug import (
    RESERVED_SLUGS,
    generate_slug,
    is_valid_slug,
    unique_slug,
)

__all__ = [
    "RESERVED_SLUGS",
    "generate_slug",
    "is_valid_money",
    "is_valid_slug",
    "to_decimal",
    "to_minor_units",
    "unique_slug",
]
