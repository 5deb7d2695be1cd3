"""Consultation, ConsultationDraft and ConsultationVersion ORM models."""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import ConsultationStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AgencyScopedModel,
    CreatedByMixin,
    CuidMixin,
    TimestampMixin,
    status_check,
)


class Consultation(AgencyScopedModel, CreatedByMixin, Base):
    """Client discovery consultation. user_id is the member who owns it."""

    __tablename__ = "consultation"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )

    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    business_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    website_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    primary_challenges: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    urgency_level: Mapped[str | None] = mapped_column(String(20), nullable=True)

    primary_goals: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    budget_range: Mapped[str | None] = mapped_column(String(50), nullable=True)
    timeline: Mapped[str | None] = mapped_column(String(50), nullable=True)

    design_styles: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    admired_websites: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    consultation_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ConsultationStatus.DRAFT.value, index=True
    )

    __table_args__ = (
        status_check("status", ConsultationStatus.values(), "consultation_status_check"),
    )


class ConsultationDraft(CuidMixin, TimestampMixin, Base):
    """Auto-saved form state. At most one draft per consultation."""

    __tablename__ = "consultation_draft"

    consultation_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("consultation.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    agency_id: Mapped[str] = mapped_column(
        String, ForeignKey("agency.id", ondelete="CASCADE"), nullable=False, index=True
    )
    contact_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    business_context: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    pain_points: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    goals_objectives: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    draft_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    auto_saved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )


class ConsultationVersion(CuidMixin, TimestampMixin, CreatedByMixin, Base):
    """Immutable snapshot taken when a consultation is completed."""

    __tablename__ = "consultation_version"

    consultation_id: Mapped[str] = mapped_column(
        String, ForeignKey("consultation.id", ondelete="CASCADE"), nullable=False, index=True
    )
    agency_id: Mapped[str] = mapped_column(
        String, ForeignKey("agency.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    change_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_fields: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint(
            "consultation_id", "version_number", name="uq_consultation_version_number"
        ),
    )
