# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

- GET /enrollments/me - The caller's enrollments with their courses
- POST /enrollments/{enrollment_id}/decision - Approve or reject
- POST /invitations/{enrollment_id}/respond - Accept or decline an invitation
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth
from src.api.errors import domain_error_to_http
from src.api.middleware.auth import CurrentUser
from src.domains.enrollment.service import EnrollmentService
from src.domains.errors import DomainError
from src.models.common import MessageResponse
from src.models.enrollment import (
    EnrollmentDecisionRequest,
    RespondInvitationRequest,
    StudentEnrollmentListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/enrollments/me",
    response_model=StudentEnrollmentListResponse,
    summary="My enrollments",
)
async def list_my_enrollments(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> StudentEnrollmentListResponse:
    """List the caller's enrollments, each with its course."""
    items = await EnrollmentService(db).get_student_enrollments(current_user.id)
    return StudentEnrollmentListResponse(items=items, total=len(items))


@router.post(
    "/enrollments/{enrollment_id}/decision",
    response_model=MessageResponse,
    summary="Approve or reject enrollment",
    description="Decide on an invited or pending enrollment of a course the caller manages.",
)
async def decide_enrollment(
    enrollment_id: str,
    data: EnrollmentDecisionRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Approve or reject an enrollment.

    Raises:
        HTTPException: 403 if the caller does not manage the course, 404
            for an unknown enrollment, 409 if it is already decided.
    """
    try:
        await EnrollmentService(db).approve_or_reject_enrollment(
            actor_id=current_user.id,
            role=current_user.role,
            enrollment_id=enrollment_id,
            approve=data.approve,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return MessageResponse(message="Enrollment approved" if data.approve else "Enrollment rejected")


@router.post(
    "/invitations/{enrollment_id}/respond",
    response_model=MessageResponse,
    summary="Respond to invitation",
)
async def respond_to_invitation(
    enrollment_id: str,
    data: RespondInvitationRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Accept or decline an invitation addressed to the caller."""
    try:
        await EnrollmentService(db).respond_to_invitation(
            student_id=current_user.id,
            enrollment_id=enrollment_id,
            accept=data.accept,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return MessageResponse(message="Invitation accepted" if data.accept else "Invitation declined")
