"""Consultation use cases: CRUD, drafts and completion with versions."""

from app.application.use_cases.consultations.consultation_operations import (
    ConsultationService,
    changed_fields,
)

__all__ = ["ConsultationService", "changed_fields"]
