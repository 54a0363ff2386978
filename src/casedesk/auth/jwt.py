"""
JWT access token management.

Tokens carry the user id in ``sub`` and the user's ``role``; the WebSocket
presence channel and the HTTP dependencies both trust only these claims.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from casedesk.config import get_settings


def create_access_token(user_id: int, role: str) -> str:
    """
    Create a short-lived access token.

    Args:
        user_id: The user's database ID.
        role: The user's role ("admin" or "user").

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = "access") -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or wrong type.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    if payload.get("type") != expected_type:
        msg = f"Expected token type '{expected_type}', got '{payload.get('type')}'"
        raise jwt.InvalidTokenError(msg)

    return payload


def user_id_from_token(token: str) -> int:
    """Verify an access token and return its subject as a user id."""
    payload = verify_token(token, expected_type="access")
    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as e:
        msg = "Invalid subject claim"
        raise jwt.InvalidTokenError(msg) from e
