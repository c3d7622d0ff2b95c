# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (services against an AsyncMock session)
- Integration tests (routers through TestClient)
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.infrastructure.database.models import Course, Enrollment, School, User
from src.models.common import EnrollmentStatus, UserRole
from src.utils.datetime import utc_now


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create a mock AsyncSession.

    add() is synchronous on a real session, so it is a MagicMock here.
    """
    db = AsyncMock()
    db.add = MagicMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    return db


def _scalar_result(value: Any) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _scalars_result(values: list[Any]) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


@pytest.fixture
def scalar_result() -> Callable[[Any], MagicMock]:
    """Build an execute() result whose scalar_one_or_none() returns a value."""
    return _scalar_result


@pytest.fixture
def scalars_result() -> Callable[[list[Any]], MagicMock]:
    """Build an execute() result whose scalars().all() returns a list."""
    return _scalars_result


# =============================================================================
# Model Factories
# =============================================================================


def _make_user(role: UserRole = UserRole.STUDENT, email: str | None = None, **kwargs: Any) -> User:
    """Build a transient User."""
    user_id = kwargs.pop("id", str(uuid4()))
    email = email or f"{role.value}-{user_id[:8]}@example.com"
    now = utc_now()
    return User(
        id=user_id,
        email=email,
        name=kwargs.pop("name", email),
        password_hash=kwargs.pop("password_hash", "$2b$12$notarealhash"),
        role=role.value,
        rating_avg=0.0,
        rating_count=0,
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def _make_school(admin_id: str, name: str = "My School") -> School:
    """Build a transient School."""
    return School(id=str(uuid4()), admin_user_id=admin_id, name=name, is_verified=False)


def _make_course(
    teacher_id: str | None = None,
    school_id: str | None = None,
    title: str = "Algebra I",
) -> Course:
    """Build a transient Course."""
    now = utc_now()
    return Course(
        id=str(uuid4()),
        title=title,
        description="",
        schedule=None,
        school_id=school_id,
        teacher_id=teacher_id,
        price=0.0,
        created_at=now,
        updated_at=now,
    )


def _make_enrollment(
    student_id: str,
    course_id: str,
    status: EnrollmentStatus = EnrollmentStatus.INVITED,
) -> Enrollment:
    """Build a transient Enrollment."""
    return Enrollment(
        id=str(uuid4()),
        student_user_id=student_id,
        course_id=course_id,
        status=status.value,
        enrolled_at=utc_now(),
    )


@pytest.fixture
def make_user() -> Callable[..., User]:
    """Factory for transient users."""
    return _make_user


@pytest.fixture
def make_school() -> Callable[..., School]:
    """Factory for transient schools."""
    return _make_school


@pytest.fixture
def make_course() -> Callable[..., Course]:
    """Factory for transient courses."""
    return _make_course


@pytest.fixture
def make_enrollment() -> Callable[..., Enrollment]:
    """Factory for transient enrollments."""
    return _make_enrollment
