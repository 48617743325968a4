"""
JWT Bearer Authentication for Tubely.

Provides token helpers and the FastAPI dependency that resolves the
calling user's identity on protected endpoints.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header

from app.config import get_settings
from app.errors import AuthError

logger = logging.getLogger(__name__)


def get_bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header value.

    Raises:
        AuthError: If the header is missing or malformed
    """
    if not authorization:
        raise AuthError("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthError("Malformed Authorization header")

    return parts[1]


def make_jwt(user_id: str, secret: str, expires_in: Optional[int] = None) -> str:
    """Issue an access token for ``user_id`` signed with ``secret``."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else settings.jwt_expiry_seconds
    claims = {
        "iss": settings.jwt_issuer,
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(seconds=lifetime),
    }
    return jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)


def validate_jwt(token: str, secret: str) -> str:
    """
    Validate an access token and return the user id it was issued for.

    Raises:
        AuthError: If the signature, issuer or expiry check fails
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token received")
        raise AuthError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token received: {e}")
        raise AuthError("Invalid token")

    user_id = str(claims.get("sub") or "").strip()
    if not user_id:
        raise AuthError("Invalid token")
    return user_id


async def get_current_user_id(
    authorization: Optional[str] = Header(None),
) -> str:
    """
    FastAPI dependency resolving the caller's identity from the bearer token.

    Args:
        authorization: The Authorization header value

    Raises:
        AuthError: 401 if the token is missing or invalid
    """
    settings = get_settings()
    token = get_bearer_token(authorization)
    user_id = validate_jwt(token, settings.jwt_secret)
    logger.debug(f"Authenticated user {user_id}")
    return user_id
