"""Activity log helper shared by use cases."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.application.dtos.activity import ActivityEntry

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import IActivityLogRepository


async def record_activity(
    activity_repo: IActivityLogRepository | None,
    caller: CallerContext,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    *,
    old_values: dict[str, Any] | None = None,
    new_values: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Append an activity entry for caller. No-op when no repository is wired."""
    if activity_repo is None:
        return
    entry = ActivityEntry(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        old_values=old_values,
        new_values=new_values,
        metadata=metadata or {},
    )
    await activity_repo.log(
        entry,
        user_id=caller.user_id,
        ip_address=caller.ip_address,
        user_agent=caller.user_agent,
    )
