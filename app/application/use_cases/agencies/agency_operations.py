"""Agency operations: create, get current, update, slug availability."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from app.application.dtos.agency import AgencyCreate, AgencyResult, AgencyUpdate
from app.application.dtos.caller import CallerContext
from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.enums import EntityType, MemberRole, MembershipStatus
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.slug import (
    RESERVED_SLUGS,
    generate_slug,
    is_valid_slug,
    unique_slug,
)
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IAgencyProfileRepository,
        IAgencyRepository,
        IMembershipRepository,
        IUserRepository,
    )
    from app.application.interfaces.services import IQueryCache

logger = logging.getLogger(__name__)

# Used when a name folds to fewer characters than a valid slug needs.
FALLBACK_SLUG = "agency"


class AgencyService:
    """Agency lifecycle outside deletion.

    Creation happens before the caller belongs to the agency, so it takes
    the user id directly and builds its own context for the activity log.
    """

    def __init__(
        self,
        agency_repo: IAgencyRepository,
        membership_repo: IMembershipRepository | None = None,
        user_repo: IUserRepository | None = None,
        profile_repo_factory: Callable[[str], IAgencyProfileRepository] | None = None,
        activity_repo_factory: Callable[[str], IActivityLogRepository] | None = None,
        cache: IQueryCache | None = None,
    ) -> None:
        self.agency_repo = agency_repo
        self.membership_repo = membership_repo
        self.user_repo = user_repo
        self.profile_repo_factory = profile_repo_factory
        self.activity_repo_factory = activity_repo_factory
        self.cache = cache

    def _activity_repo(self, agency_id: str) -> IActivityLogRepository | None:
        if self.activity_repo_factory is None:
            return None
        return self.activity_repo_factory(agency_id)

    async def _resolve_slug(self, data: AgencyCreate) -> str:
        if data.slug:
            slug = data.slug.strip().lower()
            if not is_valid_slug(slug):
                raise ValidationException(
                    "Slug must be 3-50 lowercase letters, digits or hyphens and not reserved",
                    field="slug",
                )
            if await self.agency_repo.slug_exists(slug):
                raise ConflictException("Slug is already taken", slug=slug)
            return slug
        base = generate_slug(data.name)
        if len(base) < 3:
            base = f"{base}-{FALLBACK_SLUG}".strip("-")
        return await unique_slug(base, self.agency_repo.slug_exists, reserved=RESERVED_SLUGS)

    async def create_agency(
        self,
        user_id: str,
        data: AgencyCreate,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AgencyResult:
        """Create an agency owned by user_id.

        Creates the agency with a unique slug, an active owner membership and
        the default business profile, and sets the user's default agency when
        they have none. Must run inside one transaction.
        """
        name = data.name.strip()
        if not name:
            raise ValidationException("Agency name is required", field="name")
        slug = await self._resolve_slug(data)
        agency = await self.agency_repo.create_agency(
            AgencyCreate(
                name=name,
                email=data.email,
                phone=data.phone,
                website=data.website,
                slug=slug,
            ),
            slug,
        )
        membership_id = None
        if self.membership_repo is not None:
            membership = await self.membership_repo.create_membership(
                agency.id,
                user_id,
                MemberRole.OWNER,
                MembershipStatus.ACTIVE,
                accepted_at=utc_now(),
            )
            membership_id = membership.id
        if self.profile_repo_factory is not None:
            await self.profile_repo_factory(agency.id).create_default()
        if self.user_repo is not None:
            await self.user_repo.set_default_agency_if_unset(user_id, agency.id)

        owner = CallerContext(
            agency_id=agency.id,
            user_id=user_id,
            role=MemberRole.OWNER,
            membership_id=membership_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        await record_activity(
            self._activity_repo(agency.id),
            owner,
            "agency.created",
            EntityType.AGENCY.value,
            agency.id,
            new_values={"name": agency.name, "slug": agency.slug},
        )
        logger.info("Agency created: %s (%s) by user %s", agency.id, agency.slug, user_id)
        return agency

    @cached_query("agency.current")
    async def get_current_agency(self, caller: CallerContext) -> AgencyResult:
        agency = await self.agency_repo.get_by_id(caller.agency_id)
        if agency is None:
            raise ResourceNotFoundException("agency", caller.agency_id)
        return agency

    async def update_agency(self, caller: CallerContext, update: AgencyUpdate) -> AgencyResult:
        """Update details and branding (settings:edit_branding). Unset fields are kept."""
        require(caller.role, "settings:edit_branding")
        changes = update.changes()
        if "name" in changes:
            changes["name"] = str(changes["name"]).strip()
            if not changes["name"]:
                raise ValidationException("Agency name is required", field="name")
        current = await self.get_current_agency(caller)
        if not changes:
            return current
        updated = await self.agency_repo.update_agency(caller.agency_id, changes)
        if updated is None:
            raise ResourceNotFoundException("agency", caller.agency_id)
        invalidate_entities(self.cache, {EntityType.AGENCY})
        await record_activity(
            self._activity_repo(caller.agency_id),
            caller,
            "agency.updated",
            EntityType.AGENCY.value,
            caller.agency_id,
            old_values={k: getattr(current, k) for k in changes},
            new_values=changes,
        )
        return updated

    async def check_slug_available(self, slug: str) -> bool:
        """True when slug is well formed, not reserved and not taken."""
        slug = slug.strip().lower()
        if not is_valid_slug(slug):
            return False
        return not await self.agency_repo.slug_exists(slug)
