"""Explicit caller context passed to every service operation."""

from dataclasses import dataclass

from app.domain.enums import MemberRole


@dataclass(frozen=True)
class CallerContext:
    """Who is calling, for which agency, with which role.

    Built once per request from the verified token and the active membership;
    the role is always read fresh from the membership row. agency_id never
    comes from a request body.
    """

    agency_id: str
    user_id: str
    role: MemberRole
    membership_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
