"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator


class LoginRequest(BaseModel):
    """Email + password login."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginUser(BaseModel):
    """The subset of the user returned with a fresh token."""

    id: int
    username: str
    role: str


class LoginResponse(BaseModel):
    """Successful login."""

    success: bool = True
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: LoginUser
