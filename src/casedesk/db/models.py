"""ORM models for users, cases and reminder notifications.

Timestamps are naive server-local wall-clock values: reminder scheduling
compares calendar days in the server's local time.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casedesk.db.base import Base

ROLE_ADMIN = "admin"
ROLE_USER = "user"

DEFAULT_CASE_STATUS = "Pending"
REMINDER_TYPE = "reminder"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_USER, server_default=ROLE_USER)
    position: Mapped[str | None] = mapped_column(String(128), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    office: Mapped[str | None] = mapped_column(String(128), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)

    cases: Mapped[list[Case]] = relationship("Case", back_populates="owner", foreign_keys="Case.user_id")


# ---------------------------------------------------------------------------
# Cases
# ---------------------------------------------------------------------------


class Case(Base):
    """A scheduled legal matter owned by a user."""

    __tablename__ = "cases"
    __table_args__ = (
        Index("idx_cases_due", "date", "notification_sent"),
        Index("idx_cases_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parties: Mapped[str | None] = mapped_column(Text, nullable=True)
    witnesses: Mapped[str | None] = mapped_column(Text, nullable=True)
    prosecutor: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(64), nullable=False, default=DEFAULT_CASE_STATUS, server_default=DEFAULT_CASE_STATUS
    )
    notification_sent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, onupdate=datetime.now)

    owner: Mapped[User | None] = relationship("User", back_populates="cases", foreign_keys=[user_id])
    creator: Mapped[User | None] = relationship("User", foreign_keys=[created_by])


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Notification(Base):
    """A persisted reminder for one case and one recipient.

    ``notify_date`` is the local calendar day the reminder was created on;
    the unique constraint allows at most one reminder per case, recipient
    and day.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        UniqueConstraint("case_id", "user_id", "notify_date", name="uq_notifications_case_user_day"),
        Index("idx_notifications_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    case_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    is_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    schedule_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default=REMINDER_TYPE, server_default=REMINDER_TYPE)
    notify_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
