# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course management authorization.

A teacher manages the courses it teaches. A school admin manages the
courses of the school it owns. Nobody else manages courses.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.course.service import CourseServiceError
from src.domains.errors import UnauthorizedError
from src.domains.school.service import SchoolService
from src.infrastructure.database.models import Course
from src.models.common import UserRole

logger = logging.getLogger(__name__)


class CourseAccessDeniedError(CourseServiceError, UnauthorizedError):
    """Raised when the actor does not manage the course."""

    pass


class CourseAccessPolicy:
    """Ownership check shared by invitation, enrollment listing and decisions."""

    def __init__(self, db: AsyncSession) -> None:
        self._schools = SchoolService(db)

    async def ensure_can_manage(self, actor_id: str, role: UserRole, course: Course) -> None:
        """Raise unless actor_id manages course.

        Raises:
            CourseAccessDeniedError: On a role or ownership mismatch.
            SchoolNotFoundError: If a school admin owns no school.
        """
        match role:
            case UserRole.TEACHER:
                allowed = course.teacher_id == actor_id
            case UserRole.SCHOOL_ADMIN:
                school = await self._schools.get_school_by_admin(actor_id)
                allowed = course.school_id is not None and course.school_id == school.id
            case UserRole.ADMIN | UserRole.STUDENT:
                allowed = False

        if not allowed:
            logger.info(
                "Course access denied: actor=%s, role=%s, course=%s",
                actor_id,
                role.value,
                course.id,
            )
            raise CourseAccessDeniedError("You do not manage this course")
