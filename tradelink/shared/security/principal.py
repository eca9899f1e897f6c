"""
Authenticated principal resolution.

Reads an ``Authorization: Bearer <jwt>`` header and returns the principal
id carried by the token. Token issuance belongs to the user service; this
module only verifies signatures and expiry with python-jose.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from tradelink.core.config import settings

logger = logging.getLogger(__name__)

PRINCIPAL_CLAIMS = ("sub", "userId")

bearer_scheme = HTTPBearer(auto_error=False)


class PrincipalAuthenticationError(Exception):
    """Raised when a request carries no valid principal token."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def decode_principal_id(token: str, secret: str, algorithm: str) -> str:
    """Verify a bearer token and return its principal id.

    Args:
        token: Encoded JWT.
        secret: Verification secret.
        algorithm: Expected signing algorithm.

    Returns:
        The ``sub`` claim, or ``userId`` for tokens issued by older clients.

    Raises:
        PrincipalAuthenticationError: If the token is invalid, expired or
            carries no principal claim.
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as exc:
        raise PrincipalAuthenticationError("Token expired") from exc
    except JWTError as exc:
        raise PrincipalAuthenticationError("Invalid token") from exc

    for claim in PRINCIPAL_CLAIMS:
        value = claims.get(claim)
        if value:
            return str(value)
    raise PrincipalAuthenticationError("Invalid token - no principal")


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """FastAPI dependency returning the authenticated principal id."""
    if credentials is None or not credentials.credentials:
        raise PrincipalAuthenticationError("Access token required")
    return decode_principal_id(
        credentials.credentials, settings.jwt_secret, settings.jwt_algorithm
    )
