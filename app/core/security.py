"""
Security utilities for JWT authentication and password hashing.

Implements stateless JWT authentication signed with a server-held secret (HS256).
Passwords are hashed using bcrypt for security.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.core.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

# Password hashing context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bcrypt has a 72-byte limit
BCRYPT_MAX_BYTES = 72


@lru_cache(maxsize=None)
def _context_with_rounds(rounds: int) -> CryptContext:
    return pwd_context.copy(bcrypt__rounds=rounds)


def _truncate(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plaintext password
        rounds: bcrypt cost factor (log rounds). Uses the passlib default when None.

    Note: Bcrypt has a 72-byte limit. Passwords longer than 72 bytes
    are automatically truncated to comply with this limitation.
    """
    if rounds is None:
        return pwd_context.hash(_truncate(password))
    return _context_with_rounds(rounds).hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns False for a mismatch or an unparseable hash, never raises.
    """
    try:
        return pwd_context.verify(_truncate(plain_password), hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


@lru_cache(maxsize=None)
def dummy_password_hash(rounds: Optional[int] = None) -> str:
    """Hash checked against when a login email is unknown, so both failures cost the same."""
    return get_password_hash("not-a-real-password", rounds=rounds)


class AuthenticatedIdentity(BaseModel):
    """Identity decoded from a verified access token."""
    user_id: UUID
    name: str


class TokenService:
    """
    Issues and verifies signed, time-limited access tokens.

    Built once from settings; the secret never leaves this object.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_delta: timedelta = timedelta(days=30)):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def __repr__(self):
        return f"<TokenService(algorithm={self.algorithm}, expires_delta={self.expires_delta})>"

    def issue(self, user_id: UUID, name: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a JWT access token.

        Args:
            user_id: Subject of the token
            name: Display name carried in the token
            expires_delta: Optional lifetime override (default: configured lifetime)

        Returns:
            Encoded JWT token as a string
        """
        expire = datetime.now(timezone.utc) + (expires_delta if expires_delta is not None else self.expires_delta)
        to_encode = {
            "sub": str(user_id),
            "name": name,
            "exp": math.ceil(expire.timestamp()),  # rounded up, never shorter than requested
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> AuthenticatedIdentity:
        """
        Decode and validate a JWT token.

        Raises:
            InvalidTokenError: If the signature is invalid, the payload is
                malformed, or the token has expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True, "leeway": 0},
            )
        except JWTError as e:
            raise InvalidTokenError() from e

        # jose accepts exp == now; expiry is inclusive here
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= datetime.now(timezone.utc).timestamp():
            raise InvalidTokenError()

        try:
            return AuthenticatedIdentity(user_id=payload.get("sub"), name=payload.get("name"))
        except PydanticValidationError as e:
            raise InvalidTokenError() from e
