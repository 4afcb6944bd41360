"""Security: verification of identity-provider access tokens."""

from app.infrastructure.security.jwt import verify_token

__all__ = [
    "verify_token",
]
