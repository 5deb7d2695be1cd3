"""JWT verification for bearer tokens issued by the auth service.

Uses app.core.config for secret and algorithm. The subject claim (sub) is
the user id.
"""

from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    return payload


def token_subject(payload: dict[str, Any]) -> str:
    """Return the user id carried in sub; ValueError when it is empty."""
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ValueError("Token missing required claim: sub")
    return subject
