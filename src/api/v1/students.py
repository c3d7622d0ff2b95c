# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student listing endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth, require_staff
from src.api.middleware.auth import CurrentUser
from src.domains.student.service import StudentService
from src.models.auth import UserResponse
from src.models.student import StudentListResponse

router = APIRouter()


@router.get(
    "",
    response_model=StudentListResponse,
    summary="Student directory",
    description="All student accounts, highest rated first. Staff only.",
)
async def list_students(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    search: str | None = Query(default=None, max_length=100, description="Name or email substring"),
    current_user: CurrentUser = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> StudentListResponse:
    students, total = await StudentService(db).list_students(limit=limit, offset=offset, search=search)
    return StudentListResponse(
        items=[UserResponse.model_validate(s) for s in students],
        total=total,
    )


@router.get(
    "/mine",
    response_model=StudentListResponse,
    summary="My students",
    description="Students enrolled in the caller's courses (teacher) or school's courses (school admin).",
)
async def list_my_students(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> StudentListResponse:
    """List students connected to the caller through enrollments."""
    students = await StudentService(db).list_my_students(current_user.id, current_user.role)
    return StudentListResponse(
        items=[UserResponse.model_validate(s) for s in students],
        total=len(students),
    )
