# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for accounts and sessions.

This module provides the main AuthService that handles:
- Account registration with role-driven profile provisioning
- Login issuing a bearer token pair
- Profile read and update
- Password change and account search

Registration provisions the role's companion row in the same transaction
as the user: a school for school admins, an independent teacher profile
for teachers and an empty student profile for students.

Example:
    >>> auth_service = AuthService(db_session, jwt_manager, PasswordHasher())
    >>> user = await auth_service.register("a@school.tj", "secret1", UserRole.TEACHER)
    >>> user, tokens = await auth_service.login("a@school.tj", "secret1")
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.jwt import JWTManager, TokenPair
from src.domains.auth.password import PasswordHasher
from src.domains.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from src.infrastructure.database.models import School, StudentProfile, TeacherProfile, User
from src.models.common import UserRole

logger = logging.getLogger(__name__)

DEFAULT_SCHOOL_NAME = "My School"


class AuthServiceError(Exception):
    """Base exception for authentication errors."""

    pass


class EmailAlreadyExistsError(AuthServiceError, ConflictError):
    """Raised when the email is already registered."""

    pass


class InvalidCredentialsError(AuthServiceError, UnauthorizedError):
    """Raised when email or password is wrong."""

    pass


class UserNotFoundError(AuthServiceError, NotFoundError):
    """Raised when the user does not exist."""

    pass


class RegistrationNotAllowedError(AuthServiceError, InvalidArgumentError):
    """Raised when the requested role cannot be self-registered."""

    pass


def normalize_email(email: str) -> str:
    """Lowercase and strip an email for storage and lookup."""
    return email.strip().lower()


class AuthService:
    """Account registration, login and profile management.

    Attributes:
        _db: Database session for queries.
        _jwt_manager: JWT token manager.
        _password_hasher: bcrypt password hasher.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher,
    ) -> None:
        """Initialize the authentication service.

        Args:
            db: Async database session.
            jwt_manager: JWT token manager.
            password_hasher: Password hasher.
        """
        self._db = db
        self._jwt_manager = jwt_manager
        self._password_hasher = password_hasher

    async def register(
        self,
        email: str,
        password: str,
        role: UserRole,
        name: str | None = None,
    ) -> User:
        """Register a new account and provision its role profile.

        Args:
            email: Login email, unique across accounts.
            password: Plain text password.
            role: Account role, fixed for the lifetime of the account.
            name: Display name, defaults to the email.

        Returns:
            The created user.

        Raises:
            EmailAlreadyExistsError: If the email is taken.
            RegistrationNotAllowedError: If role is admin.
        """
        user = await self.create_account(email, password, role, name)

        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise EmailAlreadyExistsError("Email is already registered")

        await self._db.refresh(user)

        logger.info("Registered user: id=%s, role=%s", user.id, user.role)
        return user

    async def create_account(
        self,
        email: str,
        password: str,
        role: UserRole,
        name: str | None = None,
    ) -> User:
        """Stage a user and its role profile without committing.

        Callers that need to change the provisioned rows before they are
        persisted (adding a teacher to a school) use this and commit
        themselves.
        """
        email = normalize_email(email)

        if await self._get_user_by_email(email):
            raise EmailAlreadyExistsError("Email is already registered")

        user = User(
            email=email,
            name=name or email,
            password_hash=self._password_hasher.hash(password),
            role=role.value,
        )
        self._db.add(user)

        try:
            await self._db.flush()
        except IntegrityError:
            await self._db.rollback()
            raise EmailAlreadyExistsError("Email is already registered")

        match role:
            case UserRole.SCHOOL_ADMIN:
                self._db.add(School(admin_user_id=user.id, name=DEFAULT_SCHOOL_NAME))
            case UserRole.TEACHER:
                self._db.add(TeacherProfile(user_id=user.id, school_id=None, bio="", subjects=[]))
            case UserRole.STUDENT:
                self._db.add(StudentProfile(user_id=user.id, parent_name="", grade_level=""))
            case UserRole.ADMIN:
                await self._db.rollback()
                raise RegistrationNotAllowedError("Admin accounts cannot be self-registered")

        await self._db.flush()
        return user

    async def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """Authenticate with email and password.

        Returns:
            The user and a freshly issued token pair.

        Raises:
            InvalidCredentialsError: If the email is unknown or the
                password does not match. Both cases look the same to
                the caller.
        """
        user = await self._get_user_by_email(normalize_email(email))

        if not user or not self._password_hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt for email: %s", email)
            raise InvalidCredentialsError("Invalid email or password")

        tokens = self._jwt_manager.create_token_pair(
            user_id=user.id,
            email=user.email,
            role=user.role,
        )

        logger.info("User logged in: id=%s", user.id)
        return user, tokens

    async def get_profile(self, user_id: str) -> User:
        """Get a user by ID.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self._get_user(user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    async def update_profile(self, user_id: str, name: str, email: str) -> User:
        """Update name and email. The role is never changed here.

        Raises:
            UserNotFoundError: If the user does not exist.
            EmailAlreadyExistsError: If the new email belongs to another user.
        """
        user = await self.get_profile(user_id)
        email = normalize_email(email)

        if email != user.email:
            other = await self._get_user_by_email(email)
            if other and other.id != user.id:
                raise EmailAlreadyExistsError("Email is already registered")

        user.name = name
        user.email = email

        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise EmailAlreadyExistsError("Email is already registered")

        await self._db.refresh(user)

        logger.info("Updated profile: user=%s", user.id)
        return user

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """Replace the password after checking the current one.

        Raises:
            UserNotFoundError: If the user does not exist.
            InvalidCredentialsError: If current_password does not match.
        """
        user = await self.get_profile(user_id)

        if not self._password_hasher.verify(current_password, user.password_hash):
            logger.info("Failed password change for user: %s", user_id)
            raise InvalidCredentialsError("Current password is incorrect")

        user.password_hash = self._password_hasher.hash(new_password)
        await self._db.commit()

        logger.info("Password changed: user=%s", user.id)

    async def search_users(self, query: str, limit: int = 20) -> list[User]:
        """Find accounts whose name or email contains query, any role.

        A blank query matches nothing.
        """
        query = query.strip()
        if not query:
            return []

        pattern = f"%{query}%"
        stmt = (
            select(User)
            .where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
            .order_by(User.name)
            .limit(limit)
        )
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def _get_user(self, user_id: str) -> User | None:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_user_by_email(self, email: str) -> User | None:
        """Get user by normalized email."""
        stmt = select(User).where(User.email == email)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()
