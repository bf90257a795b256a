"""
Authentication endpoints for user registration and login.

Implements JWT-based stateless authentication:
- POST /register: Create new user account and receive a token
- POST /login: Authenticate and receive a token
"""

import logging
from fastapi import APIRouter, Depends, status

from app.core.deps import get_auth_service
from app.schemas.user import UserRegisterRequest, UserLoginRequest, AuthResponse, UserResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(
    request: UserRegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user account.

    Returns a JWT token for immediate use. Fails with 409 if the email
    is already registered.
    """
    result = auth_service.register(
        email=request.email,
        name=request.name,
        password=request.password
    )

    return AuthResponse(user=UserResponse.model_validate(result.user), token=result.token)


@router.post("/login", response_model=AuthResponse)
def login(
    request: UserLoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate user and return a JWT token.

    Unknown email and wrong password both fail with the same 401 response.
    """
    result = auth_service.login(email=request.email, password=request.password)

    return AuthResponse(user=UserResponse.model_validate(result.user), token=result.token)
