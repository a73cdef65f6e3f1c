"""Pydantic schemas for authentication.

Request and response models for:
- Registration and login
- Token responses
- User profile
"""

from typing import Self

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from learnhub.auth.permissions import UserRole
from learnhub.auth.validators import (
    validate_password,
    validate_password_confirmation,
    validate_username,
)


# ==============================================================================
# Request Schemas
# ==============================================================================


class RegisterRequest(BaseModel):
    """Account registration request."""

    username: str = Field(..., description="Username")
    email: EmailStr = Field(..., description="Email address")
    first_name: str = Field("", max_length=150)
    last_name: str = Field("", max_length=150)
    role: UserRole = Field(..., description="student or instructor")
    password: str = Field(..., description="Password")
    password2: str = Field(..., description="Password confirmation")

    @field_validator("username")
    @classmethod
    def validate_username_format(cls, v: str) -> str:
        v = v.strip()
        result = validate_username(v)
        if not result.valid:
            raise ValueError(result.message or "Invalid username")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        result = validate_password(v)
        if not result.valid:
            raise ValueError(result.message or "Invalid password")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        result = validate_password_confirmation(self.password, self.password2)
        if not result.valid:
            raise ValueError(result.message or "Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """Login request."""

    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


# ==============================================================================
# Response Schemas
# ==============================================================================


class UserResponse(BaseModel):
    """Authenticated user profile."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.STUDENT

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    @property
    def is_instructor(self) -> bool:
        return self.role in (UserRole.INSTRUCTOR, UserRole.ADMIN)


class AuthResponse(BaseModel):
    """Login/registration response: user plus token pair."""

    model_config = ConfigDict(extra="ignore")

    user: UserResponse
    access: str
    refresh: str


class TokenRefreshResponse(BaseModel):
    """Refresh endpoint response (rotation may return a new refresh token)."""

    model_config = ConfigDict(extra="ignore")

    access: str
    refresh: str | None = None
