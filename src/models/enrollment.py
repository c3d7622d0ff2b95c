# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.common import EnrollmentStatus
from src.models.course import CourseResponse


class InviteStudentRequest(BaseModel):
    """Invite a student to a course by email."""

    email: EmailStr = Field(..., description="Email of the student to invite")


class RespondInvitationRequest(BaseModel):
    """Student response to an invitation."""

    accept: bool = Field(..., description="True to join the course, False to decline")


class EnrollmentDecisionRequest(BaseModel):
    """Teacher or school admin decision on an enrollment."""

    approve: bool = Field(..., description="True to approve, False to reject")


class EnrollmentResponse(BaseModel):
    """Enrollment row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_user_id: str
    course_id: str
    status: EnrollmentStatus
    enrolled_at: datetime | None = None


class EnrollmentWithCourse(BaseModel):
    """Enrollment together with the course it refers to."""

    enrollment: EnrollmentResponse
    course: CourseResponse


class EnrollmentListResponse(BaseModel):
    """Enrollments of a course."""

    items: list[EnrollmentResponse]
    total: int


class StudentEnrollmentListResponse(BaseModel):
    """Enrollments of the calling student."""

    items: list[EnrollmentWithCourse]
    total: int
