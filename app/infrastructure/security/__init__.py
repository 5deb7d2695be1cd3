"""Security: bearer token verification. Tokens are issued by the auth service."""

from app.infrastructure.security.jwt import token_subject, verify_token

__all__ = [
    "token_subject",
    "verify_token",
]
