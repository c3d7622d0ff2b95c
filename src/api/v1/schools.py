# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School management API endpoints.

- GET /teachers - List the teachers of the caller's school
- POST /teachers - Create a teacher account in the caller's school

Both require the school_admin role.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_auth_service, get_db, require_school_admin
from src.api.errors import domain_error_to_http
from src.api.middleware.auth import CurrentUser
from src.domains.auth.service import AuthService
from src.domains.errors import DomainError
from src.domains.school.service import SchoolService
from src.models.auth import UserResponse
from src.models.school import AddTeacherRequest, TeacherListResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/teachers",
    response_model=TeacherListResponse,
    summary="List school teachers",
)
async def list_teachers(
    current_user: CurrentUser = Depends(require_school_admin),
    db: AsyncSession = Depends(get_db),
) -> TeacherListResponse:
    """List the teachers attached to the caller's school."""
    try:
        teachers = await SchoolService(db).list_teachers(current_user.id)
    except DomainError as e:
        raise domain_error_to_http(e)

    return TeacherListResponse(
        items=[UserResponse.model_validate(t) for t in teachers],
        total=len(teachers),
    )


@router.post(
    "/teachers",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add teacher",
)
async def add_teacher(
    data: AddTeacherRequest,
    current_user: CurrentUser = Depends(require_school_admin),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Create a teacher account attached to the caller's school."""
    logger.info("Adding teacher: email=%s, by=%s", data.email, current_user.id)

    try:
        user = await SchoolService(db, auth_service).add_teacher(
            admin_id=current_user.id,
            email=data.email,
            password=data.password,
            bio=data.bio,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return UserResponse.model_validate(user)
