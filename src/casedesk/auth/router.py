"""Authentication router: /api/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.auth.dependencies import get_current_user
from casedesk.auth.jwt import create_access_token
from casedesk.auth.schemas import LoginRequest, LoginResponse, LoginUser
from casedesk.auth.service import authenticate_user
from casedesk.config import get_settings
from casedesk.database import get_session
from casedesk.db.models import User
from casedesk.notifications.service import check_pending_notifications
from casedesk.ws.presence import presence

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Login with email + password, then deliver any reminders due tomorrow."""
    try:
        user = await authenticate_user(db, body.email, body.password)
    except ValueError as e:
        logger.info("login_failed", email=body.email)
        raise HTTPException(status_code=401, detail=str(e)) from e

    settings = get_settings()
    token = create_access_token(user.id, user.role)

    # Never fails: reminder problems must not block a login.
    created = await check_pending_notifications(user.id, registry=presence)
    logger.info("login_succeeded", user_id=user.id, role=user.role, reminders_created=created)

    return LoginResponse(
        token=token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=LoginUser(id=user.id, username=user.username, role=user.role),
    )


@router.post("/logout")
async def logout(user: User = Depends(get_current_user)) -> dict[str, str]:
    """Acknowledge a logout; tokens are stateless and simply expire."""
    logger.info("logout", user_id=user.id)
    return {"detail": "Logged out"}
