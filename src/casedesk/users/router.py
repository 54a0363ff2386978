"""Profile and user administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.auth.dependencies import get_current_user, require_admin
from casedesk.auth.password import PasswordStrengthError
from casedesk.auth.service import get_user_by_id
from casedesk.database import get_session
from casedesk.db.models import User
from casedesk.users.schemas import (
    ProfileUpdateRequest,
    UserCreateRequest,
    UserDeletedResponse,
    UserResponse,
    UserUpdateRequest,
)
from casedesk.users.service import (
    EmailTakenError,
    create_user,
    delete_user,
    list_users,
    update_profile,
)

router = APIRouter(prefix="/api", tags=["Users"])


# ---------------------------------------------------------------------------
# Own profile
# ---------------------------------------------------------------------------


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)) -> User:
    return user


@router.put("/profile", response_model=UserResponse)
async def edit_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> User:
    try:
        return await update_profile(db, user, **body.model_dump())
    except EmailTakenError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------


@router.get("/users", response_model=list[UserResponse])
async def all_users(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> list[User]:
    return await list_users(db)


@router.post("/users", response_model=UserResponse, status_code=201)
async def add_user(
    body: UserCreateRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> User:
    try:
        return await create_user(db, body.username, body.email, body.password, body.role)
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EmailTakenError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.put("/users/{user_id}", response_model=UserResponse)
async def edit_user(
    user_id: int,
    body: UserUpdateRequest,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> User:
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    try:
        return await update_profile(db, user, **body.model_dump())
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EmailTakenError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.delete("/users/{user_id}", response_model=UserDeletedResponse)
async def remove_user(
    user_id: int,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> UserDeletedResponse:
    """Delete a user together with their cases and notifications."""
    user = await delete_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserDeletedResponse(
        message="User deleted",
        deleted_user=UserResponse.model_validate(user),
    )
