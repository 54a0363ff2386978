"""Request/response schemas for case endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Placeholder some clients send for "no value".
_EMPTY_MARKER = "EMPTY"


class CaseWriteRequest(BaseModel):
    """Body for creating or replacing a case."""

    title: str = Field(..., min_length=1, max_length=256)
    date: datetime
    type: str | None = Field(None, max_length=64)
    description: str | None = None
    parties: str | None = None
    witnesses: str | None = None
    prosecutor: str | None = None

    @field_validator("date")
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        """Store wall-clock time: convert aware datetimes to server-local."""
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @field_validator("witnesses", "prosecutor")
    @classmethod
    def blank_empty_marker(cls, v: str | None) -> str:
        if v is None or v == _EMPTY_MARKER:
            return ""
        return v


class CaseStatusRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=64)


class CaseResponse(BaseModel):
    """A case as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None
    created_by: int | None
    title: str
    date: datetime
    type: str | None
    description: str | None
    parties: str | None
    witnesses: str | None
    prosecutor: str | None
    status: str
    notification_sent: bool
    created_at: datetime
    updated_at: datetime | None


class CaseDetailResponse(CaseResponse):
    """A case with display helpers for the detail view."""

    created_by_username: str | None = None
    formatted_date: str


class CaseDeletedResponse(BaseModel):
    message: str
    deleted_case: CaseResponse
