"""Case API endpoints: /api/cases/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.auth.dependencies import get_current_user
from casedesk.cases.schemas import (
    CaseDeletedResponse,
    CaseDetailResponse,
    CaseResponse,
    CaseStatusRequest,
    CaseWriteRequest,
)
from casedesk.cases.service import (
    create_case,
    delete_case,
    get_case,
    list_cases,
    update_case,
    update_case_status,
)
from casedesk.database import get_session
from casedesk.db.models import Case, User

router = APIRouter(prefix="/api/cases", tags=["Cases"])

_NOT_FOUND = "Case not found"


def _detail(case: Case) -> CaseDetailResponse:
    return CaseDetailResponse(
        **CaseResponse.model_validate(case).model_dump(),
        created_by_username=case.creator.username if case.creator else None,
        formatted_date=case.date.strftime("%Y-%m-%d"),
    )


@router.get("", response_model=list[CaseResponse])
async def list_my_cases(
    type: str | None = Query(None, max_length=64),  # noqa: A002
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[Case]:
    """List the caller's cases, newest date first."""
    return await list_cases(db, user.id, type)


@router.post("", response_model=CaseResponse, status_code=201)
async def add_case(
    body: CaseWriteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Case:
    return await create_case(db, user.id, body.model_dump())


@router.get("/{case_id}", response_model=CaseDetailResponse)
async def case_detail(
    case_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CaseDetailResponse:
    case = await get_case(db, case_id, user.id)
    if case is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return _detail(case)


@router.put("/{case_id}", response_model=CaseResponse)
async def edit_case(
    case_id: int,
    body: CaseWriteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Case:
    case = await update_case(db, case_id, user.id, body.model_dump())
    if case is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return case


@router.put("/{case_id}/status", response_model=CaseResponse)
async def edit_case_status(
    case_id: int,
    body: CaseStatusRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Case:
    case = await update_case_status(db, case_id, user.id, body.status)
    if case is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return case


@router.delete("/{case_id}", response_model=CaseDeletedResponse)
async def remove_case(
    case_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CaseDeletedResponse:
    """Delete a case and its notifications."""
    case = await delete_case(db, case_id, user.id)
    if case is None:
        raise HTTPException(status_code=404, detail="Case not found or not owned by you")
    return CaseDeletedResponse(
        message="Case deleted",
        deleted_case=CaseResponse.model_validate(case),
    )
