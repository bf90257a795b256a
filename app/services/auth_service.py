"""
Registration and login.

Both operations touch the credential store at most once and issue a fresh
access token on success. Login failures are deliberately indistinguishable:
an unknown email and a wrong password produce the same error.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationError, DuplicateUserError
from app.core.security import TokenService, dummy_password_hash, get_password_hash, verify_password
from app.crud import user as user_crud
from app.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid Credentials"


@dataclass
class AuthResult:
    user: User
    token: str


class AuthService:
    def __init__(self, db: Session, token_service: TokenService, bcrypt_rounds: Optional[int] = None):
        self.db = db
        self.token_service = token_service
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, email: str, name: str, password: str) -> AuthResult:
        """
        Create a user account and issue a token for it.

        Raises:
            DuplicateUserError: If the email is already registered, including
                when a concurrent registration wins the unique constraint
        """
        email = email.lower()
        if user_crud.get_by_email(self.db, email) is not None:
            logger.info(f"Registration rejected, email already in use: {email}")
            raise DuplicateUserError()

        hashed_password = get_password_hash(password, rounds=self.bcrypt_rounds)
        try:
            user = user_crud.create(self.db, email=email, name=name, hashed_password=hashed_password)
        except IntegrityError:
            logger.info(f"Registration lost unique-email race: {email}")
            raise DuplicateUserError()

        logger.info(f"New user registered: {user.email} (id: {user.id})")
        return AuthResult(user=user, token=self.token_service.issue(user.id, user.name))

    def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = user_crud.get_by_email(self.db, email)
        if user is None:
            # Spend the same hashing time as a real check
            verify_password(password, dummy_password_hash(self.bcrypt_rounds))
            logger.warning("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(password, user.hashed_password):
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        logger.info(f"User logged in: {user.email}")
        return AuthResult(user=user, token=self.token_service.issue(user.id, user.name))
