# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service for school and teacher management.

This module provides the SchoolService that handles:
- School lookup by its admin
- Adding teacher accounts to a school
- Listing a school's teachers
- Lazy teacher profile provisioning

Example:
    >>> school_service = SchoolService(db_session, auth_service)
    >>> school = await school_service.get_school_by_admin(admin_id)
    >>> teachers = await school_service.list_teachers(admin_id)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.service import AuthService
from src.domains.errors import NotFoundError
from src.infrastructure.database.models import School, TeacherProfile, User
from src.models.common import UserRole

logger = logging.getLogger(__name__)


class SchoolServiceError(Exception):
    """Base exception for school service errors."""

    pass


class SchoolNotFoundError(SchoolServiceError, NotFoundError):
    """Raised when a school admin has no school."""

    pass


class SchoolService:
    """Service for schools and their teachers.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession, auth_service: AuthService | None = None) -> None:
        """Initialize school service.

        Args:
            db: Async database session.
            auth_service: Used to create teacher accounts. Only required
                by add_teacher.
        """
        self.db = db
        self._auth_service = auth_service

    async def get_school_by_admin(self, admin_id: str) -> School:
        """Get the school owned by a school admin.

        Raises:
            SchoolNotFoundError: If the admin owns no school.
        """
        stmt = select(School).where(School.admin_user_id == admin_id)
        result = await self.db.execute(stmt)
        school = result.scalar_one_or_none()

        if not school:
            raise SchoolNotFoundError("School not found for this admin")

        return school

    async def add_teacher(
        self,
        admin_id: str,
        email: str,
        password: str,
        bio: str = "",
    ) -> User:
        """Create a teacher account attached to the admin's school.

        The account, its teacher profile and the school link are written in
        one transaction.

        Args:
            admin_id: School admin performing the action.
            email: Teacher login email.
            password: Teacher initial password.
            bio: Teacher biography.

        Returns:
            The created teacher user.

        Raises:
            SchoolNotFoundError: If the admin owns no school.
            EmailAlreadyExistsError: If the email is taken.
        """
        if self._auth_service is None:
            raise RuntimeError("SchoolService.add_teacher requires an AuthService")

        school = await self.get_school_by_admin(admin_id)

        user = await self._auth_service.create_account(email, password, UserRole.TEACHER)

        profile = await self._get_teacher_profile(user.id)
        if profile is None:
            profile = TeacherProfile(user_id=user.id, subjects=[])
            self.db.add(profile)
        profile.school_id = school.id
        profile.bio = bio

        await self.db.commit()
        await self.db.refresh(user)

        logger.info("Added teacher to school: teacher=%s, school=%s", user.id, school.id)
        return user

    async def list_teachers(self, admin_id: str) -> list[User]:
        """List the teachers attached to the admin's school.

        Raises:
            SchoolNotFoundError: If the admin owns no school.
        """
        school = await self.get_school_by_admin(admin_id)

        stmt = (
            select(User)
            .join(TeacherProfile, TeacherProfile.user_id == User.id)
            .where(TeacherProfile.school_id == school.id)
            .order_by(User.name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def ensure_teacher_profile(self, user_id: str) -> TeacherProfile:
        """Return the user's teacher profile, creating an independent one if absent.

        The new profile is flushed but not committed; the caller's unit of
        work decides.
        """
        profile = await self._get_teacher_profile(user_id)
        if profile:
            return profile

        profile = TeacherProfile(user_id=user_id, school_id=None, bio="", subjects=[])
        self.db.add(profile)
        await self.db.flush()

        logger.info("Created teacher profile: user=%s", user_id)
        return profile

    async def _get_teacher_profile(self, user_id: str) -> TeacherProfile | None:
        stmt = select(TeacherProfile).where(TeacherProfile.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
