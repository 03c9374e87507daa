"""User Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

NAME_PATTERN = r"^[a-zA-ZáéíóúÁÉÍÓÚüÜñÑ\s]+$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserBase(BaseModel):
    """Base user schema."""

    first_name: str = Field(
        ..., min_length=2, max_length=50, pattern=NAME_PATTERN,
        description="First name (2-50 letters and spaces)",
    )
    last_name: str = Field(
        ..., min_length=2, max_length=50, pattern=NAME_PATTERN,
        description="Last name (2-50 letters and spaces)",
    )
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Email address")


class UserCreate(UserBase):
    """Schema for creating a user."""

    password: str = Field(
        ..., min_length=6, max_length=100, description="Password (6-100 characters)"
    )

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """bcrypt cannot hash NUL bytes."""
        if "\x00" in v:
            raise ValueError("Password must not contain NUL characters")
        return v


class UserLogin(BaseModel):
    """Schema for user login."""

    email: str = Field(..., min_length=1, description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class UserResponse(UserBase):
    """Schema for user response."""

    id: str
    inserted_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Schema for register/login response: the user and a bearer token."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
