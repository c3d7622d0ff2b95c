# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course request/response models."""

from datetime import date, datetime

from pydantic import BaseModel, Field

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Schedule(BaseModel):
    """Weekly schedule of a course.

    Stored as given. Only the field types and the HH:MM time shape are
    checked; day labels are free-form ("Mon", "Monday") and slots may run
    past midnight.
    """

    days: list[str] = Field(default_factory=list, description="Days the course meets")
    start_date: date | None = Field(default=None, description="First day of the course")
    end_date: date | None = Field(default=None, description="Last day of the course")
    start_time: str | None = Field(default=None, pattern=_TIME_PATTERN, description="HH:MM")
    end_time: str | None = Field(default=None, pattern=_TIME_PATTERN, description="HH:MM")


class CourseCreateRequest(BaseModel):
    """Course creation request.

    teacher_id is required when a school admin creates the course and
    ignored when a teacher creates it.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=10000)
    schedule: Schedule | None = None
    price: float = Field(default=0.0, ge=0)
    teacher_id: str | None = Field(default=None, description="Teacher for school courses")


class CourseResponse(BaseModel):
    """Course with the names of its teacher and school."""

    id: str
    title: str
    description: str
    schedule: Schedule | None = None
    school_id: str | None = None
    teacher_id: str | None = None
    price: float
    teacher_name: str | None = None
    teacher_email: str | None = None
    school_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CourseListResponse(BaseModel):
    """List of courses."""

    items: list[CourseResponse]
    total: int
