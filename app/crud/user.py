"""
CRUD operations for User model (the credential store).
"""

from typing import Optional
from sqlalchemy.orm import Session
from app.models.user import User


def get_by_email(db: Session, email: str) -> Optional[User]:
    """Retrieve a user by email. Emails are compared lower-cased."""
    return db.query(User).filter(User.email == email.lower()).first()


def create(db: Session, email: str, name: str, hashed_password: str) -> User:
    """
    Persist a new user.

    Raises:
        sqlalchemy.exc.IntegrityError: If the email is already taken. The
            session is rolled back before the error propagates.
    """
    db_user = User(
        email=email.lower(),
        name=name,
        hashed_password=hashed_password,
    )

    db.add(db_user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_user)

    return db_user
