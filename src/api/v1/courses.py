# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

This module provides endpoints for courses and their enrollments:
- GET / - List courses visible to the caller
- POST / - Create a course (teacher or school admin)
- POST /{course_id}/invite - Invite a student by email
- POST /{course_id}/request-access - Request access (students only)
- GET /{course_id}/enrollments - List a course's enrollments
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth, require_student
from src.api.errors import domain_error_to_http
from src.api.middleware.auth import CurrentUser
from src.domains.course.service import CourseService
from src.domains.enrollment.service import EnrollmentService
from src.domains.errors import DomainError
from src.models.common import MessageResponse
from src.models.course import CourseCreateRequest, CourseListResponse, CourseResponse
from src.models.enrollment import EnrollmentListResponse, InviteStudentRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=CourseListResponse,
    summary="List courses",
    description="Students see all courses, teachers their own, school admins their school's.",
)
async def list_courses(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> CourseListResponse:
    """List courses visible to the caller."""
    courses = await CourseService(db).list_courses(current_user.id, current_user.role)
    return CourseListResponse(items=courses, total=len(courses))


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="Teachers create their own courses; school admins create school courses for a teacher.",
)
async def create_course(
    data: CourseCreateRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    """Create a course.

    Raises:
        HTTPException: 400 if a school admin omits teacher_id, 403 for
            other roles.
    """
    try:
        return await CourseService(db).create_course(current_user.id, current_user.role, data)
    except DomainError as e:
        raise domain_error_to_http(e)


@router.post(
    "/{course_id}/invite",
    response_model=MessageResponse,
    summary="Invite student",
    description="Invite a student by email. The caller must manage the course.",
)
async def invite_student(
    course_id: str,
    data: InviteStudentRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Invite a student to a course.

    Raises:
        HTTPException: 404 for an unknown course or student, 403 if the
            caller does not manage the course, 409 if already enrolled.
    """
    try:
        await EnrollmentService(db).invite_student(
            inviter_id=current_user.id,
            role=current_user.role,
            course_id=course_id,
            student_email=data.email,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return MessageResponse(message="Invitation sent")


@router.post(
    "/{course_id}/request-access",
    response_model=MessageResponse,
    summary="Request access",
    description="Ask to join a course. Available to students only.",
)
async def request_access(
    course_id: str,
    current_user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Request access to a course."""
    try:
        await EnrollmentService(db).request_enrollment(current_user.id, course_id)
    except DomainError as e:
        raise domain_error_to_http(e)

    return MessageResponse(message="Access requested")


@router.get(
    "/{course_id}/enrollments",
    response_model=EnrollmentListResponse,
    summary="List course enrollments",
)
async def list_course_enrollments(
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> EnrollmentListResponse:
    """List the enrollments of a course the caller manages."""
    try:
        items = await EnrollmentService(db).get_course_enrollments(
            actor_id=current_user.id,
            role=current_user.role,
            course_id=course_id,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return EnrollmentListResponse(items=items, total=len(items))
