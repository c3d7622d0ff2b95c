# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Import from this package so every table is registered on Base.metadata
before migrations or queries run.
"""

from src.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid
from src.infrastructure.database.models.course import Course, Enrollment
from src.infrastructure.database.models.school import School, TeacherProfile
from src.infrastructure.database.models.user import StudentProfile, User

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "User",
    "StudentProfile",
    "School",
    "TeacherProfile",
    "Course",
    "Enrollment",
]
