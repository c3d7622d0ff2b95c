# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides the enrollment lifecycle including:
- Invitations and access requests
- Invitation responses
- Approve/reject decisions
"""

from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    DecisionNotAllowedError,
    EnrollmentNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
    InvalidEnrollmentStatusError,
    NotAStudentError,
    StudentNotFoundError,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentServiceError",
    "CourseNotFoundError",
    "StudentNotFoundError",
    "NotAStudentError",
    "EnrollmentNotFoundError",
    "AlreadyEnrolledError",
    "InvalidEnrollmentStatusError",
    "DecisionNotAllowedError",
]
