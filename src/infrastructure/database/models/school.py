# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School and teacher profile models.

Every school_admin owns exactly one School, created at registration.
Teachers have a TeacherProfile; school_id is null for independent teachers.
"""

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid
from src.infrastructure.database.models.user import User


class School(Base, TimestampMixin):
    """School owned by a single school_admin user.

    Attributes:
        id: School UUID.
        admin_user_id: Owning school_admin (unique).
        name: School name.
        is_verified: Whether the school has been verified by an admin.
        rating_avg: Aggregate rating maintained by the rating subsystem.
        rating_count: Number of ratings received.
    """

    __tablename__ = "schools"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    admin_user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tax_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating_avg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    admin: Mapped[User] = relationship(foreign_keys=[admin_user_id])

    def __repr__(self) -> str:
        return f"<School {self.name}>"


class TeacherProfile(Base, TimestampMixin):
    """Teacher profile, 1:1 with a User of role teacher."""

    __tablename__ = "teacher_profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    school_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    subjects: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    hourly_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    user: Mapped[User] = relationship(foreign_keys=[user_id])
    school: Mapped[School | None] = relationship(foreign_keys=[school_id])
