"""Request/response schemas for profile and user administration."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserResponse(BaseModel):
    """Public user profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str
    position: str | None = None
    phone: str | None = None
    office: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    """Fields a user may change on their own profile."""

    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    position: str | None = Field(None, max_length=128)
    phone: str | None = Field(None, max_length=32)
    office: str | None = Field(None, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UserCreateRequest(BaseModel):
    """Admin: create an account."""

    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    role: Literal["admin", "user"] = "user"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UserUpdateRequest(ProfileUpdateRequest):
    """Admin: edit an account. The password changes only when given."""

    password: str | None = Field(None, max_length=128)


class UserDeletedResponse(BaseModel):
    success: bool = True
    message: str
    deleted_user: UserResponse
