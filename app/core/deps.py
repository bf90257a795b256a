"""
FastAPI dependencies for authentication and service wiring.

These dependencies are used to protect endpoints and extract user context.
"""

import logging
from functools import lru_cache
from typing import Optional
from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError
from app.core.logging_config import bind_user
from app.core.security import AuthenticatedIdentity, TokenService
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error=False so a missing or malformed header reaches our own error mapping
security = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def get_auth_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, token_service, bcrypt_rounds=settings.BCRYPT_ROUNDS)


async def authenticate_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> AuthenticatedIdentity:
    """
    Access guard for protected routes.

    This dependency:
    1. Requires an `Authorization: Bearer <token>` header
    2. Verifies the token signature and expiry
    3. Attaches the decoded identity to `request.state.user` and the log context

    No database lookup is made; the token alone proves identity.

    Raises:
        AuthenticationError: If the header is missing or not a Bearer credential
        InvalidTokenError: If the token fails verification
    """
    if credentials is None:
        logger.warning(f"Missing or malformed Authorization header on {request.url.path}")
        raise AuthenticationError()

    identity = token_service.verify(credentials.credentials)
    request.state.user = identity
    bind_user(identity.user_id)
    return identity
