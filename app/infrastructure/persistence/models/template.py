"""Agency proposal template ORM model."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import AgencyScopedModel, CreatedByMixin


class AgencyProposalTemplate(AgencyScopedModel, CreatedByMixin, Base):
    """Proposal template (sections, header/footer). Read-only here; used by the export."""

    __tablename__ = "agency_proposal_template"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )
    sections: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    header_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    footer_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
