"""Verification of Supabase-issued access tokens.

Tokens are minted by the identity provider; this service only verifies them
with the project's JWT secret (HS256) and reads the subject.
"""

from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a Supabase access token. Returns the payload.

    Enforces presence of exp and sub, and the audience when one is configured.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    audience = settings.supabase_jwt_audience or None
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            audience=audience,
            options={
                "require_exp": True,
                "require_sub": True,
                "verify_aud": audience is not None,
            },
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if "sub" not in payload:
        raise ValueError("Token missing required claim: sub")
    return payload
