"""Domain enumerations for the agency platform.

Enums represent fixed sets of domain values (agency status, member roles,
invoice lifecycle, etc.). Values are stored as plain strings in the database.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]


class AgencyStatus(_ValuesMixin, str, Enum):
    """Agency account status. CANCELLED is set when a deletion is executed."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class SubscriptionTier(_ValuesMixin, str, Enum):
    """Agency subscription tier."""

    FREE = "free"
    STARTER = "starter"
    GROWTH = "growth"
    ENTERPRISE = "enterprise"


class MemberRole(_ValuesMixin, str, Enum):
    """Role of a user inside an agency. Determines the permitted action set."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class MembershipStatus(_ValuesMixin, str, Enum):
    """Membership lifecycle status."""

    ACTIVE = "active"
    INVITED = "invited"
    SUSPENDED = "suspended"


class DeletionState(_ValuesMixin, str, Enum):
    """Derived state of the agency deletion lifecycle."""

    ACTIVE = "active"
    SCHEDULED = "scheduled"
    EXPIRED = "expired"
    DELETED = "deleted"


class PricingModel(_ValuesMixin, str, Enum):
    """How a package is billed."""

    SUBSCRIPTION = "subscription"
    LUMP_SUM = "lump_sum"
    HYBRID = "hybrid"


class CancellationFeeType(_ValuesMixin, str, Enum):
    """Fee charged when a client cancels a package early."""

    NONE = "none"
    FIXED = "fixed"
    REMAINING_BALANCE = "remaining_balance"


class ConsultationStatus(_ValuesMixin, str, Enum):
    """Consultation lifecycle status."""

    DRAFT = "draft"
    COMPLETED = "completed"
    ARCHIVED = "archived"
    CONVERTED = "converted"


class InvoiceStatus(_ValuesMixin, str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


# Payment links may only be created for invoices a client can still pay.
PAYABLE_INVOICE_STATUSES = frozenset(
    {InvoiceStatus.SENT, InvoiceStatus.VIEWED, InvoiceStatus.OVERDUE}
)


class StripeAccountStatus(_ValuesMixin, str, Enum):
    """Local view of the connected Stripe account."""

    NOT_CONNECTED = "not_connected"
    PENDING = "pending"
    ACTIVE = "active"
    RESTRICTED = "restricted"
    DISABLED = "disabled"


class EntityType(_ValuesMixin, str, Enum):
    """Entity types read by cached queries; commands invalidate by entity type."""

    AGENCY = "agency"
    MEMBERSHIP = "membership"
    PROFILE = "profile"
    PACKAGE = "package"
    CONSULTATION = "consultation"
    INVOICE = "invoice"
    TEMPLATE = "template"
    ACTIVITY = "activity"
