# app/schemas/auth/auth_schema.py
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.users import UserOut


def _normalize_email_value(email: str | None) -> str:
    """Normalize user-provided email strings for consistent lookups."""
    if email is None:
        raise ValueError("Email cannot be empty.")
    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("Email cannot be empty.")
    return normalized


class LoginRequest(BaseModel):
    email: EmailStr = Field(
        ...,
        description="User's email address",
        json_schema_extra={"example": "student@example.com"},
    )
    password: str = Field(
        ...,
        min_length=1,
        json_schema_extra={"example": "student123"},
    )

    @field_validator("email", mode="before")
    def normalize_email(cls, email: str) -> str:
        return _normalize_email_value(email)


# Token
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


# Update password
class UpdatePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="New password (6 to 128 characters)",
        json_schema_extra={"example": "n3w-passw0rd"},
    )

    @field_validator("new_password")
    def validate_password(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters.")
        return value
