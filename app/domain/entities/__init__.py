"""Domain entities (persistence-independent business objects)."""

from app.domain.entities.agency import (
    DELETION_GRACE_PERIOD_DAYS,
    AgencyEntity,
    confirmation_phrase_matches,
    expected_deletion_phrase,
)

__all__ = [
    "DELETION_GRACE_PERIOD_DAYS",
    "AgencyEntity",
    "confirmation_phrase_matches",
    "expected_deletion_phrase",
]
