"""
Pydantic schemas for User authentication and registration.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.sanitize import clean_text


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""
    name: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,  # bcrypt limit
        description="Password must be 6-72 characters"
    )

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str) -> str:
        return clean_text(v, "Name", max_length=50, min_length=3)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserLoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseModel):
    """Public user profile (no sensitive data)."""
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response for register and login."""
    user: UserResponse
    token: str
