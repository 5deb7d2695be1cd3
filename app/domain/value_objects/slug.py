"""URL slug generation and validation for agencies and packages."""

import re
import unicodedata
from collections.abc import Awaitable, Callable

from app.domain.exceptions import ConflictException

SLUG_MAX_LENGTH = 50
SLUG_MAX_ATTEMPTS = 100

# Agency slugs share the URL namespace with application routes.
RESERVED_SLUGS = frozenset(
    {
        "admin",
        "dashboard",
        "settings",
        "agencies",
        "api",
        "auth",
        "super-admin",
        "consultation",
        "login",
        "logout",
        "signup",
        "register",
        "profile",
        "account",
    }
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_VALID_SLUG_RE = re.compile(r"^[a-z0-9][a-z0-9-]{1,48}[a-z0-9]$")


def generate_slug(name: str) -> str:
    """Return a URL-safe slug for name.

    Unicode is folded to ASCII, runs of anything that is not a lowercase
    letter or digit become a single hyphen, and the result is at most
    SLUG_MAX_LENGTH characters with no leading or trailing hyphen.
    """
    folded = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM_RE.sub("-", folded.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH].strip("-")


def is_valid_slug(slug: str, *, allow_reserved: bool = False) -> bool:
    """Return True if slug has the canonical shape (3-50 chars) and is not reserved."""
    if not allow_reserved and slug in RESERVED_SLUGS:
        return False
    return bool(_VALID_SLUG_RE.match(slug))


def slug_candidates(base: str, max_attempts: int = SLUG_MAX_ATTEMPTS):
    """Yield base, base-1, base-2, ... (max_attempts candidates in total).

    Suffixed candidates are trimmed so they never exceed SLUG_MAX_LENGTH.
    """
    yield base
    for counter in range(1, max_attempts):
        suffix = f"-{counter}"
        yield f"{base[: SLUG_MAX_LENGTH - len(suffix)].rstrip('-')}{suffix}"


async def unique_slug(
    base: str,
    exists: Callable[[str], Awaitable[bool]],
    *,
    reserved: frozenset[str] = frozenset(),
    max_attempts: int = SLUG_MAX_ATTEMPTS,
) -> str:
    """Return the first candidate from slug_candidates(base) that is free.

    Args:
        base: Starting slug (usually from generate_slug).
        exists: Async predicate; True when the slug is already taken.
        reserved: Slugs that are never handed out.
        max_attempts: Upper bound on candidates tried.

    Raises:
        ConflictException: When every candidate is taken.
    """
    for candidate in slug_candidates(base, max_attempts):
        if candidate in reserved:
            continue
        if not await exists(candidate):
            return candidate
    raise ConflictException(
        f"Unable to generate a unique slug from '{base}'", slug=base
    )
