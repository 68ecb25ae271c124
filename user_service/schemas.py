"""Pydantic schemas for request/response validation and serialization."""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from .config import settings
from .utils import normalize_email


# ==================== Error Schemas ====================

class ErrorCode:
    """Centralized error codes for API responses."""
    USER_NOT_FOUND = "USER_NOT_FOUND"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"


# ==================== User Schemas ====================

class User(BaseModel):
    """Snapshot of one row of the users table.

    The password hash is kept for verification but excluded from every
    serialization, so a User can be returned from handlers or written into
    the identity cookie as-is. When parsed back from JSON it is empty.
    """
    id: int
    email: str
    password: str = Field(default="", exclude=True, repr=False)
    full_name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None


class CreateUser(BaseModel):
    """Input for creating a user. The password is plaintext and never stored as-is."""
    email: EmailStr = Field(..., max_length=settings.USER_EMAIL_MAX_LENGTH, description="User's email address")
    password: str = Field(
        ...,
        min_length=settings.PASSWORD_MIN_LENGTH,
        max_length=settings.PASSWORD_MAX_LENGTH,
        description="Plaintext password, hashed before storage",
    )
    full_name: str = Field(..., min_length=1, max_length=settings.USER_NAME_MAX_LENGTH, description="User's full name")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """bcrypt rejects inputs longer than its byte limit, so count encoded bytes."""
        if len(v.encode('utf-8')) > settings.PASSWORD_MAX_LENGTH:
            raise ValueError(f"Password must be at most {settings.PASSWORD_MAX_LENGTH} bytes when UTF-8 encoded")
        return v

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        """Validate full name is not just whitespace."""
        if not v.strip():
            raise ValueError("Full name cannot be empty or only whitespace")
        return v.strip()


# ==================== Authentication Schemas ====================

class UserLogin(BaseModel):
    """Schema for user login credentials."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class DeleteResponse(BaseModel):
    """Number of rows removed by a delete."""
    deleted: int
