"""Bearer token authentication.

Tokens are HS256 JWTs signed with JWT_SECRET whose `sub` claim carries the
user ID. Tool endpoints accept anonymous callers, so most routes use
get_optional_user; a malformed or invalid token is still rejected rather
than silently downgraded to anonymous.
"""

import logging
from typing import Optional

import jwt
from fastapi import HTTPException

from backend.settings import Settings

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Invalid authorization header")
    return token.strip()


def decode_user_id(token: str, settings: Settings) -> str:
    """Verify a token and return its subject.

    Raises:
        HTTPException: 401 when the token is expired, badly signed or has
            no subject; 503 when no signing secret is configured.
    """
    if not settings.jwt_secret:
        raise HTTPException(status_code=503, detail="Authentication not configured")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise _unauthorized("Invalid token")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _unauthorized("Invalid token")
    return user_id


async def get_current_user(authorization: Optional[str], settings: Settings) -> str:
    token = extract_bearer_token(authorization)
    if token is None:
        raise _unauthorized("Not authenticated")
    return decode_user_id(token, settings)


async def get_optional_user(authorization: Optional[str], settings: Settings) -> Optional[str]:
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    return decode_user_id(token, settings)
