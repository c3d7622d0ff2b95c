# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for the invitation and access-request lifecycle.

This module provides the EnrollmentService class for:
- Inviting students to a course (status invited)
- Students requesting access to a course (status pending)
- Students answering invitations
- Teachers and school admins approving or rejecting enrollments
- Listing enrollments per student and per course

Status transitions:

    invite   -> invited -> active | rejected
    request  -> pending -> active | rejected

At most one enrollment exists per (student, course). The existence check
is backed by the uq_enrollments_student_course constraint, so a racing
insert fails on flush and is reported as AlreadyEnrolledError.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.auth.service import normalize_email
from src.domains.course.access import CourseAccessPolicy
from src.domains.course.service import to_course_response
from src.domains.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)
from src.domains.student.service import StudentService
from src.infrastructure.database.models import Course, Enrollment, User
from src.models.common import EnrollmentStatus, UserRole
from src.models.enrollment import EnrollmentResponse, EnrollmentWithCourse

logger = logging.getLogger(__name__)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class CourseNotFoundError(EnrollmentServiceError, NotFoundError):
    """Raised when the course is not found."""

    pass


class StudentNotFoundError(EnrollmentServiceError, NotFoundError):
    """Raised when no user has the given email."""

    pass


class NotAStudentError(EnrollmentServiceError, InvalidArgumentError):
    """Raised when the invited user is not a student."""

    pass


class EnrollmentNotFoundError(EnrollmentServiceError, NotFoundError):
    """Raised when the enrollment is not found or not visible to the caller."""

    pass


class AlreadyEnrolledError(EnrollmentServiceError, ConflictError):
    """Raised when the student already has an enrollment for the course."""

    pass


class InvalidEnrollmentStatusError(EnrollmentServiceError, InvalidStateError):
    """Raised when the enrollment's status does not allow the transition."""

    pass


class DecisionNotAllowedError(EnrollmentServiceError, UnauthorizedError):
    """Raised when the role may not approve or reject enrollments."""

    pass


class EnrollmentService:
    """Service for managing course enrollments.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
        """
        self.db = db
        self._policy = CourseAccessPolicy(db)
        self._students = StudentService(db)

    async def invite_student(
        self,
        inviter_id: str,
        role: UserRole,
        course_id: str,
        student_email: str,
    ) -> None:
        """Invite a student to a course.

        Creates an invited enrollment and links the student's profile to the
        course's school and teacher, in one transaction.

        Args:
            inviter_id: Teacher or school admin sending the invitation.
            role: Inviter's role.
            course_id: Course identifier.
            student_email: Email of the student to invite.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the inviter does not manage the course.
            StudentNotFoundError: If no user has this email.
            NotAStudentError: If the user is not a student.
            AlreadyEnrolledError: If an enrollment exists in any status.
        """
        course = await self._get_course(course_id)
        await self._policy.ensure_can_manage(inviter_id, role, course)

        student = await self._get_user_by_email(normalize_email(student_email))
        if not student:
            raise StudentNotFoundError("Student not found")
        if student.role != UserRole.STUDENT.value:
            raise NotAStudentError("User is not a student")

        enrollment = await self._insert_enrollment(
            student.id,
            course.id,
            EnrollmentStatus.INVITED,
            conflict_message="Student already enrolled or invited",
        )
        await self._students.link_to_course(student.id, course)

        await self.db.commit()

        logger.info(
            "Invited student: enrollment=%s, student=%s, course=%s, by=%s",
            enrollment.id,
            student.id,
            course.id,
            inviter_id,
        )

    async def request_enrollment(self, student_id: str, course_id: str) -> None:
        """Create a pending access request for a course.

        The caller's role is checked by the route. No profile linkage happens
        until the request is approved.

        Raises:
            CourseNotFoundError: If the course does not exist.
            AlreadyEnrolledError: If an enrollment exists in any status.
        """
        course = await self._get_course(course_id)

        enrollment = await self._insert_enrollment(
            student_id,
            course.id,
            EnrollmentStatus.PENDING,
            conflict_message="Student already enrolled or access requested",
        )
        await self.db.commit()

        logger.info(
            "Requested enrollment: enrollment=%s, student=%s, course=%s",
            enrollment.id,
            student_id,
            course.id,
        )

    async def respond_to_invitation(
        self,
        student_id: str,
        enrollment_id: str,
        accept: bool,
    ) -> None:
        """Accept or decline an invitation.

        Only the invited student sees the enrollment; anyone else gets
        EnrollmentNotFoundError.

        Raises:
            EnrollmentNotFoundError: If the student has no such enrollment.
            InvalidEnrollmentStatusError: If the enrollment is not invited.
        """
        enrollments = await self._list_student_enrollments(student_id)
        enrollment = next((e for e in enrollments if e.id == enrollment_id), None)

        if enrollment is None:
            raise EnrollmentNotFoundError("Enrollment not found")

        if enrollment.status != EnrollmentStatus.INVITED.value:
            raise InvalidEnrollmentStatusError("Enrollment is not in invited status")

        new_status = EnrollmentStatus.ACTIVE if accept else EnrollmentStatus.REJECTED
        enrollment.status = new_status.value
        await self.db.commit()

        logger.info(
            "Invitation answered: enrollment=%s, student=%s, status=%s",
            enrollment.id,
            student_id,
            new_status.value,
        )

    async def approve_or_reject_enrollment(
        self,
        actor_id: str,
        role: UserRole,
        enrollment_id: str,
        approve: bool,
    ) -> None:
        """Decide on an invited or pending enrollment.

        The actor must manage the enrollment's course. A decided enrollment
        cannot be decided again.

        Raises:
            DecisionNotAllowedError: If role is neither teacher nor school_admin.
            EnrollmentNotFoundError: If the enrollment does not exist.
            CourseAccessDeniedError: If the actor does not manage the course.
            InvalidEnrollmentStatusError: If the enrollment is already decided.
        """
        match role:
            case UserRole.TEACHER | UserRole.SCHOOL_ADMIN:
                pass
            case UserRole.ADMIN | UserRole.STUDENT:
                raise DecisionNotAllowedError("Only teachers and school admins can decide enrollments")

        enrollment = await self._get_enrollment_by_id(enrollment_id)
        if not enrollment:
            raise EnrollmentNotFoundError("Enrollment not found")

        course = await self._get_course(enrollment.course_id)
        await self._policy.ensure_can_manage(actor_id, role, course)

        if not EnrollmentStatus(enrollment.status).is_undecided:
            raise InvalidEnrollmentStatusError(
                f"Enrollment is already decided ({enrollment.status})"
            )

        previous = enrollment.status
        new_status = EnrollmentStatus.ACTIVE if approve else EnrollmentStatus.REJECTED
        enrollment.status = new_status.value
        await self.db.commit()

        logger.info(
            "Enrollment decided: enrollment=%s, %s -> %s, by=%s",
            enrollment.id,
            previous,
            new_status.value,
            actor_id,
        )

    async def get_student_enrollments(self, student_id: str) -> list[EnrollmentWithCourse]:
        """List a student's enrollments, each with its course."""
        enrollments = await self._list_student_enrollments(student_id, with_course=True)
        return [
            EnrollmentWithCourse(
                enrollment=EnrollmentResponse.model_validate(enrollment),
                course=to_course_response(enrollment.course),
            )
            for enrollment in enrollments
        ]

    async def get_course_enrollments(
        self,
        actor_id: str,
        role: UserRole,
        course_id: str,
    ) -> list[EnrollmentResponse]:
        """List the enrollments of a course the actor manages.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the actor does not manage the course.
        """
        course = await self._get_course(course_id)
        await self._policy.ensure_can_manage(actor_id, role, course)

        stmt = (
            select(Enrollment)
            .where(Enrollment.course_id == course.id)
            .order_by(Enrollment.enrolled_at)
        )
        result = await self.db.execute(stmt)
        return [EnrollmentResponse.model_validate(e) for e in result.scalars().all()]

    async def _insert_enrollment(
        self,
        student_id: str,
        course_id: str,
        status: EnrollmentStatus,
        conflict_message: str,
    ) -> Enrollment:
        """Insert an enrollment unless one exists for the pair.

        Raises:
            AlreadyEnrolledError: If a row exists, or a concurrent insert
                won the unique constraint.
        """
        if await self._get_enrollment(student_id, course_id):
            raise AlreadyEnrolledError(conflict_message)

        enrollment = Enrollment(
            student_user_id=student_id,
            course_id=course_id,
            status=status.value,
        )
        self.db.add(enrollment)

        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "Concurrent enrollment insert rejected: student=%s, course=%s",
                student_id,
                course_id,
            )
            raise AlreadyEnrolledError(conflict_message)

        return enrollment

    async def _get_course(self, course_id: str) -> Course:
        """Get course by ID."""
        stmt = select(Course).where(Course.id == course_id)
        result = await self.db.execute(stmt)
        course = result.scalar_one_or_none()

        if not course:
            raise CourseNotFoundError("Course not found")

        return course

    async def _get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_enrollment(self, student_id: str, course_id: str) -> Enrollment | None:
        """Get the enrollment for a (student, course) pair in any status."""
        stmt = select(Enrollment).where(
            Enrollment.student_user_id == student_id,
            Enrollment.course_id == course_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_enrollment_by_id(self, enrollment_id: str) -> Enrollment | None:
        stmt = select(Enrollment).where(Enrollment.id == enrollment_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _list_student_enrollments(
        self,
        student_id: str,
        with_course: bool = False,
    ) -> list[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.student_user_id == student_id)
        if with_course:
            stmt = stmt.options(
                selectinload(Enrollment.course).selectinload(Course.teacher),
                selectinload(Enrollment.course).selectinload(Course.school),
            )
        stmt = stmt.order_by(Enrollment.enrolled_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
