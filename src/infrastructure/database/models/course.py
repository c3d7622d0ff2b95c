# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course and enrollment models.

A Course belongs either to a School (school_id set, teacher chosen by the
school admin) or to an independent teacher (school_id null).

An Enrollment links one student to one course. At most one row may exist
per (student_user_id, course_id); the unique constraint backs the
application-level existence check against concurrent inserts.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid
from src.infrastructure.database.models.school import School
from src.infrastructure.database.models.user import User
from src.utils.datetime import utc_now


class Course(Base, TimestampMixin):
    """Course offered by a school or an independent teacher.

    Attributes:
        id: Course UUID.
        title: Course title.
        description: Free-text description.
        schedule: Optional schedule (days, date range, time range) as JSON.
        school_id: Owning school, null for independent teachers.
        teacher_id: Teaching user.
        price: Course price.
    """

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    schedule: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    school_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    teacher_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    school: Mapped[School | None] = relationship(foreign_keys=[school_id])
    teacher: Mapped[User | None] = relationship(foreign_keys=[teacher_id])

    def __repr__(self) -> str:
        return f"<Course {self.title}>"


class Enrollment(Base):
    """Student enrollment in a course with its lifecycle status.

    Status values: invited, pending, active, completed, dropped, rejected.
    """

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint(
            "student_user_id",
            "course_id",
            name="uq_enrollments_student_course",
        ),
        Index("ix_enrollments_course_status", "course_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    student_user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    student: Mapped[User] = relationship(foreign_keys=[student_user_id])
    course: Mapped[Course] = relationship(foreign_keys=[course_id])

    def __repr__(self) -> str:
        return f"<Enrollment {self.student_user_id} -> {self.course_id} ({self.status})>"
