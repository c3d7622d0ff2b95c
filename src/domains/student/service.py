# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for profile linkage and student listings.

A student's profile records the school and teacher that first invited
it. Later invitations only fill fields that are still empty.
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.school.service import SchoolNotFoundError, SchoolService
from src.infrastructure.database.models import Course, Enrollment, StudentProfile, User
from src.models.common import UserRole

logger = logging.getLogger(__name__)


class StudentService:
    """Service for student profiles and teacher/school student lists.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._schools = SchoolService(db)

    async def link_to_course(self, student_user_id: str, course: Course) -> StudentProfile:
        """Associate a student with the course's school and teacher.

        Creates the profile when absent. Otherwise sets school_id and
        teacher_id only where they are still null. Changes are flushed,
        not committed.

        Args:
            student_user_id: Invited student.
            course: Course the student was invited to.

        Returns:
            The student profile.
        """
        profile = await self._get_profile(student_user_id)

        if profile is None:
            profile = StudentProfile(
                user_id=student_user_id,
                parent_name="",
                grade_level="",
                school_id=course.school_id,
                teacher_id=course.teacher_id,
            )
            self.db.add(profile)
            logger.info(
                "Created student profile: student=%s, school=%s, teacher=%s",
                student_user_id,
                course.school_id,
                course.teacher_id,
            )
        else:
            if profile.school_id is None and course.school_id is not None:
                profile.school_id = course.school_id
            if profile.teacher_id is None and course.teacher_id is not None:
                profile.teacher_id = course.teacher_id

        await self.db.flush()
        return profile

    async def list_my_students(self, user_id: str, role: UserRole) -> list[User]:
        """List distinct students enrolled in the caller's courses.

        Teachers get students of the courses they teach, school admins get
        students of their school's courses. Other roles get an empty list.
        """
        stmt = (
            select(User)
            .join(Enrollment, Enrollment.student_user_id == User.id)
            .join(Course, Course.id == Enrollment.course_id)
        )

        match role:
            case UserRole.TEACHER:
                stmt = stmt.where(Course.teacher_id == user_id)
            case UserRole.SCHOOL_ADMIN:
                try:
                    school = await self._schools.get_school_by_admin(user_id)
                except SchoolNotFoundError:
                    return []
                stmt = stmt.where(Course.school_id == school.id)
            case UserRole.ADMIN | UserRole.STUDENT:
                return []

        stmt = stmt.distinct().order_by(User.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_students(
        self,
        limit: int = 50,
        offset: int = 0,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        """Page through all student accounts, highest rated first.

        Args:
            limit: Page size.
            offset: Rows to skip.
            search: Case-insensitive substring of the name or email.

        Returns:
            The page of students and the total number of matches.
        """
        conditions = [User.role == UserRole.STUDENT.value]
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            conditions.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        total = await self.db.scalar(select(func.count()).select_from(User).where(*conditions))

        stmt = (
            select(User)
            .where(*conditions)
            .order_by(User.rating_avg.desc(), User.name)
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total or 0

    async def _get_profile(self, student_user_id: str) -> StudentProfile | None:
        stmt = select(StudentProfile).where(StudentProfile.user_id == student_user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
