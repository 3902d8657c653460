"""
Authentication guard for Task API.
Verifies the bearer token and resolves it to the calling identity.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import InvalidCredential
from .security import INVALID_TOKEN_MESSAGE, decode_access_token

# Configure logging
logger = logging.getLogger(__name__)

# Security scheme; missing credentials are reported by get_current_user
security = HTTPBearer(
    scheme_name="Bearer Token",
    description="JWT Bearer token issued at registration or login",
    auto_error=False,
)


class CurrentUser:
    """Represents the current authenticated user."""

    def __init__(self, user_id: str, username: Optional[str] = None):
        self.user_id = user_id
        self.username = username

    def __str__(self):
        return f"User(id={self.user_id}, username={self.username})"

    def __repr__(self):
        return self.__str__()

    @classmethod
    def from_claims(cls, claims: dict) -> "CurrentUser":
        """Create CurrentUser from decoded token claims."""
        return cls(user_id=claims["sub"], username=claims.get("username"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Dependency to get current authenticated user.

    Args:
        credentials: HTTP Bearer credentials from request, if any

    Returns:
        CurrentUser: Current authenticated user

    Raises:
        InvalidCredential: If the token is absent, malformed, expired or
            carries no identity claim
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Request without bearer token")
        raise InvalidCredential(INVALID_TOKEN_MESSAGE)

    claims = decode_access_token(credentials.credentials)
    if not claims.get("sub"):
        logger.warning("Token verification failed: no subject claim")
        raise InvalidCredential(INVALID_TOKEN_MESSAGE)

    current_user = CurrentUser.from_claims(claims)
    logger.debug(f"Authenticated user: {current_user}")
    return current_user
