# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain package.

This package provides course functionality including:
- Course creation by teachers and school admins
- Role-scoped course listing
- The course management policy
"""

from src.domains.course.access import CourseAccessDeniedError, CourseAccessPolicy
from src.domains.course.service import (
    CourseCreationNotAllowedError,
    CourseNotFoundError,
    CourseService,
    CourseServiceError,
    TeacherRequiredError,
    to_course_response,
)

__all__ = [
    "CourseAccessDeniedError",
    "CourseAccessPolicy",
    "CourseService",
    "CourseServiceError",
    "CourseNotFoundError",
    "TeacherRequiredError",
    "CourseCreationNotAllowedError",
    "to_course_response",
]
