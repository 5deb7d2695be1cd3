"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid, generate_public_slug

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_public_slug",
    "utc_now",
]
