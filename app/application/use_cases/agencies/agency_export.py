"""GDPR data export: full agency export (owner) and personal export (any user).

Output uses stable camelCase keys so exports stay comparable across versions.
Datetimes are ISO-8601 strings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.domain.enums import EntityType
from app.domain.exceptions import ResourceNotFoundException
from app.shared.utils.datetime import isoformat_or_none, utc_now

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IAgencyRepository,
        IConsultationRepository,
        IMembershipRepository,
        IPackageRepository,
        ITemplateRepository,
        IUserRepository,
    )

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
DEFAULT_ACTIVITY_LOG_LIMIT = 1000


def _value(item: Any) -> Any:
    return getattr(item, "value", item)


class AgencyExportService:
    """Build the agency export (data:export)."""

    def __init__(
        self,
        agency_repo: IAgencyRepository,
        membership_repo: IMembershipRepository,
        template_repo: ITemplateRepository,
        consultation_repo: IConsultationRepository,
        package_repo: IPackageRepository,
        activity_repo: IActivityLogRepository,
        activity_log_limit: int = DEFAULT_ACTIVITY_LOG_LIMIT,
    ) -> None:
        self.agency_repo = agency_repo
        self.membership_repo = membership_repo
        self.template_repo = template_repo
        self.consultation_repo = consultation_repo
        self.package_repo = package_repo
        self.activity_repo = activity_repo
        self.activity_log_limit = activity_log_limit

    async def export_agency_data(self, caller: CallerContext) -> dict[str, Any]:
        require(caller.role, "data:export")
        agency = await self.agency_repo.get_by_id(caller.agency_id)
        if agency is None:
            raise ResourceNotFoundException("agency", caller.agency_id)

        members = await self.membership_repo.list_by_agency(caller.agency_id)
        templates = await self.template_repo.list_templates()
        consultations = await self.consultation_repo.list_consultations(limit=None)
        drafts = await self.consultation_repo.list_drafts()
        versions = await self.consultation_repo.list_versions()
        packages = await self.package_repo.list_packages()
        activity = await self.activity_repo.list_recent(self.activity_log_limit)

        await record_activity(
            self.activity_repo,
            caller,
            "data.exported",
            EntityType.AGENCY.value,
            caller.agency_id,
        )
        logger.info("Agency %s data exported by user %s", caller.agency_id, caller.user_id)

        return {
            "exportedAt": utc_now().isoformat(),
            "exportVersion": EXPORT_VERSION,
            "agency": {
                "id": agency.id,
                "name": agency.name,
                "slug": agency.slug,
                "email": agency.email,
                "phone": agency.phone,
                "website": agency.website,
                "branding": {
                    "logoUrl": agency.logo_url,
                    "primaryColor": agency.primary_color,
                    "secondaryColor": agency.secondary_color,
                    "accentColor": agency.accent_color,
                },
                "subscription": {
                    "tier": _value(agency.subscription_tier),
                    "status": _value(agency.status),
                },
                "createdAt": isoformat_or_none(agency.created_at),
                "updatedAt": isoformat_or_none(agency.updated_at),
            },
            "members": [
                {
                    "id": m.id,
                    "email": m.email,
                    "displayName": m.display_name,
                    "role": _value(m.role),
                    "status": _value(m.status),
                    "invitedAt": isoformat_or_none(m.invited_at),
                    "acceptedAt": isoformat_or_none(m.accepted_at),
                }
                for m in members
            ],
            "templates": [
                {
                    "id": t.id,
                    "name": t.name,
                    "isDefault": t.is_default,
                    "sections": t.sections,
                    "headerContent": t.header_content,
                    "footerContent": t.footer_content,
                    "settings": t.settings,
                    "createdAt": isoformat_or_none(t.created_at),
                }
                for t in templates
            ],
            "consultations": [
                {
                    "id": c.id,
                    "status": _value(c.status),
                    "contactInfo": {
                        "businessName": c.business_name,
                        "contactPerson": c.contact_person,
                        "email": c.email,
                        "phone": c.phone,
                        "website": c.website,
                    },
                    "businessContext": {
                        "industry": c.industry,
                        "businessType": c.business_type,
                    },
                    "painPoints": {
                        "websiteStatus": c.website_status,
                        "primaryChallenges": c.primary_challenges,
                        "urgencyLevel": c.urgency_level,
                    },
                    "goalsObjectives": {
                        "primaryGoals": c.primary_goals,
                        "budgetRange": c.budget_range,
                        "timeline": c.timeline,
                        "designStyles": c.design_styles,
                        "admiredWebsites": c.admired_websites,
                    },
                    "createdAt": isoformat_or_none(c.created_at),
                    "updatedAt": isoformat_or_none(c.updated_at),
                }
                for c in consultations
            ],
            "drafts": [
                {
                    "id": d.id,
                    "consultationId": d.consultation_id,
                    "contactInfo": d.contact_info,
                    "businessContext": d.business_context,
                    "painPoints": d.pain_points,
                    "goalsObjectives": d.goals_objectives,
                    "draftNotes": d.draft_notes,
                    "updatedAt": isoformat_or_none(d.updated_at),
                }
                for d in drafts
            ],
            "versions": [
                {
                    "id": v.id,
                    "consultationId": v.consultation_id,
                    "versionNumber": v.version_number,
                    "status": _value(v.status),
                    "changeSummary": v.change_summary,
                    "createdAt": isoformat_or_none(v.created_at),
                }
                for v in versions
            ],
            "packages": [
                {
                    "id": p.id,
                    "name": p.name,
                    "slug": p.slug,
                    "pricingModel": _value(p.pricing_model),
                    "setupFee": p.setup_fee,
                    "monthlyPrice": p.monthly_price,
                    "oneTimePrice": p.one_time_price,
                    "hostingFee": p.hosting_fee,
                    "isActive": p.is_active,
                }
                for p in packages
            ],
            # Personal details are left out of activity rows.
            "activityLog": [
                {
                    "action": a.action,
                    "entityType": a.entity_type,
                    "createdAt": isoformat_or_none(a.created_at),
                }
                for a in activity
            ],
        }


class UserExportService:
    """Build a user's personal export across every agency they belong to."""

    def __init__(
        self,
        user_repo: IUserRepository,
        membership_repo: IMembershipRepository,
    ) -> None:
        self.user_repo = user_repo
        self.membership_repo = membership_repo

    async def export_user_data(self, user_id: str) -> dict[str, Any]:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        memberships = await self.membership_repo.list_by_user(user_id)
        consultation_ids = await self.user_repo.list_consultation_ids(user_id)
        return {
            "exportedAt": utc_now().isoformat(),
            "exportVersion": EXPORT_VERSION,
            "user": {
                "id": user.id,
                "email": user.email,
                "phone": user.phone,
                "avatar": user.avatar,
                "accountCreated": isoformat_or_none(user.created_at),
                "lastUpdated": isoformat_or_none(user.updated_at),
            },
            "memberships": [
                {
                    "agencyId": m.agency_id,
                    "agencyName": agency_name,
                    "role": _value(m.role),
                    "status": _value(m.status),
                    "displayName": m.display_name,
                    "invitedAt": isoformat_or_none(m.invited_at),
                    "acceptedAt": isoformat_or_none(m.accepted_at),
                }
                for m, agency_name in memberships
            ],
            "consultationsCreated": len(consultation_ids),
            "consultationIds": consultation_ids,
        }
