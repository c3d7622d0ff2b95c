# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and student profile models.

A User carries one immutable role tag. Students get a 1:1 StudentProfile
whose school_id / teacher_id record the first institution and teacher
that invited them.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid

if TYPE_CHECKING:
    from src.infrastructure.database.models.school import School


class User(Base, TimestampMixin):
    """Platform account.

    Attributes:
        id: User UUID.
        email: Unique login email.
        name: Display name (defaults to the email at registration).
        password_hash: bcrypt hash.
        role: One of admin, school_admin, teacher, student.
        rating_avg: Aggregate rating maintained by the rating subsystem.
        rating_count: Number of ratings received.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    rating_avg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"


class StudentProfile(Base, TimestampMixin):
    """Student profile, 1:1 with a User of role student.

    school_id and teacher_id are back-references filled on the first
    invitation that supplies them and never overwritten afterwards.
    """

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    parent_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    grade_level: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    school_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
    )
    teacher_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    user: Mapped[User] = relationship(foreign_keys=[user_id])
    school: Mapped[Optional["School"]] = relationship(foreign_keys=[school_id])
