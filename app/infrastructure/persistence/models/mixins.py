"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, AgencyMixin, TimestampMixin, CreatedByMixin, the
combined AgencyScopedModel, and status_check() for enum CHECK constraints.
"""

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.generators import generate_cuid


def status_check(column: str, values: Iterable[str], name: str) -> CheckConstraint:
    """Build a CHECK constraint restricting column to the given enum values."""
    quoted = ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    return CheckConstraint(f"{column} IN ({quoted})", name=name)


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class AgencyMixin:
    """Mixin for agency-owned records. Provides agency_id FK to agency with CASCADE delete."""

    @declared_attr
    def agency_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("agency.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class CreatedByMixin:
    """Mixin for created_by (FK to app_user.id, nulled if the user is removed)."""

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String,
            ForeignKey("app_user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )


class AgencyScopedModel(CuidMixin, AgencyMixin, TimestampMixin):
    """Combined mixin: CUID + agency_id + created_at/updated_at."""

    __abstract__ = True
