"""ID and value generators (CUID primary keys, public invoice slugs)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# Public invoice URLs (/i/<slug>) must not be guessable.
PUBLIC_SLUG_BYTES = 12


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_public_slug() -> str:
    """Return a random URL-safe token for public links (e.g. invoice pages)."""
    return secrets.token_urlsafe(PUBLIC_SLUG_BYTES)
