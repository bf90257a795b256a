"""
Application error taxonomy.

Every failure raised inside request processing is either one of these tagged
errors or an unexpected exception. The error handlers translate both into the
uniform `{"msg": ...}` response shape.
"""

import enum
from typing import Dict, List, Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "ValidationError"
    AUTHENTICATION = "AuthenticationError"
    INVALID_TOKEN = "InvalidToken"
    DUPLICATE_USER = "DuplicateUser"
    NOT_FOUND = "NotFound"
    UNKNOWN = "Unknown"


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    status_code: int = 500
    default_message: str = "Something went wrong, try again later"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    """Client input is missing or malformed."""
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """Bad credentials or a missing/malformed Authorization header."""
    kind = ErrorKind.AUTHENTICATION
    status_code = 401
    default_message = "Authentication invalid"


class InvalidTokenError(AppError):
    """Token signature, payload or expiry check failed."""
    kind = ErrorKind.INVALID_TOKEN
    status_code = 401
    default_message = "Authentication invalid"


class DuplicateUserError(AppError):
    kind = ErrorKind.DUPLICATE_USER
    status_code = 409
    default_message = "Duplicate value entered for email field, please choose another value"


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Resource not found"
