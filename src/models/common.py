# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations and response models."""

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Role tag fixed on a user at registration."""

    ADMIN = "admin"
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"


class EnrollmentStatus(str, Enum):
    """Lifecycle status of an enrollment.

    invited and pending are initial states, active and rejected are the
    decided states. completed and dropped are set only by administration.
    """

    INVITED = "invited"
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"
    REJECTED = "rejected"

    @property
    def is_undecided(self) -> bool:
        """Whether the enrollment still awaits a decision."""
        return self in (EnrollmentStatus.INVITED, EnrollmentStatus.PENDING)


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str = Field(..., description="Human-readable result")
