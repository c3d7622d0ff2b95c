# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for course creation and listing.

A course belongs either to a school, created by the school's admin for
one of its teachers, or to an independent teacher who created it.

Example:
    >>> course_service = CourseService(db_session)
    >>> course = await course_service.create_course(user_id, UserRole.TEACHER, request)
    >>> courses = await course_service.list_courses(user_id, UserRole.STUDENT)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.errors import InvalidArgumentError, NotFoundError, UnauthorizedError
from src.domains.school.service import SchoolNotFoundError, SchoolService
from src.infrastructure.database.models import Course
from src.models.common import UserRole
from src.models.course import CourseCreateRequest, CourseResponse, Schedule

logger = logging.getLogger(__name__)


class CourseServiceError(Exception):
    """Base exception for course service errors."""

    pass


class CourseNotFoundError(CourseServiceError, NotFoundError):
    """Raised when a course is not found."""

    pass


class TeacherRequiredError(CourseServiceError, InvalidArgumentError):
    """Raised when a school course is created without a teacher."""

    pass


class CourseCreationNotAllowedError(CourseServiceError, UnauthorizedError):
    """Raised when the role may not create courses."""

    pass


def course_load_options() -> list:
    """Eager-load options for the teacher and school shown with a course."""
    return [selectinload(Course.teacher), selectinload(Course.school)]


def to_course_response(course: Course) -> CourseResponse:
    """Build the API view of a course with its teacher and school loaded."""
    teacher = course.teacher
    school = course.school
    return CourseResponse(
        id=course.id,
        title=course.title,
        description=course.description,
        schedule=Schedule.model_validate(course.schedule) if course.schedule else None,
        school_id=course.school_id,
        teacher_id=course.teacher_id,
        price=course.price,
        teacher_name=teacher.name if teacher else None,
        teacher_email=teacher.email if teacher else None,
        school_name=school.name if school else None,
        created_at=course.created_at,
        updated_at=course.updated_at,
    )


class CourseService:
    """Service for creating, listing and loading courses.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._schools = SchoolService(db)

    async def create_course(
        self,
        creator_id: str,
        role: UserRole,
        request: CourseCreateRequest,
    ) -> CourseResponse:
        """Create a course owned by a teacher or a school.

        Teachers own the course directly and get a teacher profile if they
        have none. School admins create it for their school and must name
        the teacher. Whether that teacher belongs to the school is not
        checked.

        Args:
            creator_id: User creating the course.
            role: Creator's role.
            request: Course data.

        Returns:
            The created course.

        Raises:
            CourseCreationNotAllowedError: If role is neither teacher nor school_admin.
            TeacherRequiredError: If a school admin omits teacher_id.
            SchoolNotFoundError: If the school admin owns no school.
        """
        match role:
            case UserRole.TEACHER:
                await self._schools.ensure_teacher_profile(creator_id)
                school_id = None
                teacher_id = creator_id
            case UserRole.SCHOOL_ADMIN:
                if not request.teacher_id:
                    raise TeacherRequiredError("teacher_id is required for school courses")
                school = await self._schools.get_school_by_admin(creator_id)
                school_id = school.id
                teacher_id = request.teacher_id
            case UserRole.ADMIN | UserRole.STUDENT:
                raise CourseCreationNotAllowedError("Only teachers and school admins can create courses")

        course = Course(
            title=request.title,
            description=request.description,
            schedule=request.schedule.model_dump(mode="json") if request.schedule else None,
            school_id=school_id,
            teacher_id=teacher_id,
            price=request.price,
        )
        self.db.add(course)
        await self.db.commit()

        logger.info(
            "Created course: id=%s, school=%s, teacher=%s, by=%s",
            course.id,
            school_id,
            teacher_id,
            creator_id,
        )

        return to_course_response(await self.get_course(course.id))

    async def list_courses(self, user_id: str, role: UserRole) -> list[CourseResponse]:
        """List the courses visible to a user.

        Students and admins see every course. Teachers see the courses they
        teach. School admins see their school's courses, or nothing if they
        own no school.
        """
        stmt = select(Course).options(*course_load_options())

        match role:
            case UserRole.STUDENT | UserRole.ADMIN:
                pass
            case UserRole.TEACHER:
                stmt = stmt.where(Course.teacher_id == user_id)
            case UserRole.SCHOOL_ADMIN:
                try:
                    school = await self._schools.get_school_by_admin(user_id)
                except SchoolNotFoundError:
                    return []
                stmt = stmt.where(Course.school_id == school.id)

        stmt = stmt.order_by(Course.created_at.desc())
        result = await self.db.execute(stmt)
        return [to_course_response(course) for course in result.scalars().all()]

    async def get_course(self, course_id: str) -> Course:
        """Load a course with its teacher and school.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        stmt = select(Course).options(*course_load_options()).where(Course.id == course_id)
        result = await self.db.execute(stmt)
        course = result.scalar_one_or_none()

        if not course:
            raise CourseNotFoundError("Course not found")

        return course
