"""
User administration and profile management.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from casedesk.auth.password import hash_password, validate_password_strength
from casedesk.auth.service import get_user_by_email, get_user_by_id
from casedesk.db.models import ROLE_USER, Case, Notification, User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class EmailTakenError(ValueError):
    """Raised when an email address already belongs to another account."""


async def _ensure_email_free(db: AsyncSession, email: str, exclude_user_id: int | None = None) -> None:
    existing = await get_user_by_email(db, email)
    if existing is not None and existing.id != exclude_user_id:
        msg = "Email already registered"
        raise EmailTakenError(msg)


async def list_users(db: AsyncSession) -> list[User]:
    """All users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return list(result.scalars().all())


async def create_user(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    """
    Create a user account.

    Raises:
        PasswordStrengthError: If the password is too short or blank.
        EmailTakenError: If the email is already registered.
    """
    validate_password_strength(password)
    await _ensure_email_free(db, email)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("user_created", user_id=user.id, role=role)
    return user


async def update_profile(
    db: AsyncSession,
    user: User,
    *,
    username: str,
    email: str,
    position: str | None,
    phone: str | None,
    office: str | None,
    password: str | None = None,
) -> User:
    """
    Overwrite a user's profile fields, and the password when one is given.

    Raises:
        PasswordStrengthError: If a new password is too short or blank.
        EmailTakenError: If the email belongs to another account.
    """
    if password:
        validate_password_strength(password)
    await _ensure_email_free(db, email, exclude_user_id=user.id)

    user.username = username
    user.email = email
    user.position = position
    user.phone = phone
    user.office = office
    if password:
        user.password_hash = hash_password(password)
    await db.commit()
    await db.refresh(user)
    logger.info("user_updated", user_id=user.id, password_changed=bool(password))
    return user


async def delete_user(db: AsyncSession, user_id: int) -> User | None:
    """Delete a user with their notifications and cases, atomically.

    Returns the deleted user, or None if no such user exists.
    """
    user = await get_user_by_id(db, user_id)
    if user is None:
        return None

    owned_cases = select(Case.id).where(Case.user_id == user_id)
    try:
        await db.execute(
            delete(Notification).where(
                (Notification.user_id == user_id) | Notification.case_id.in_(owned_cases)
            )
        )
        await db.execute(delete(Case).where(Case.user_id == user_id))
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("user_delete_failed", user_id=user_id)
        raise

    logger.info("user_deleted", user_id=user_id)
    return user

