# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School and teacher request/response models."""

from pydantic import BaseModel, EmailStr, Field

from src.models.auth import UserResponse


class AddTeacherRequest(BaseModel):
    """Create a teacher account attached to the caller's school."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    bio: str = Field(default="", max_length=5000)


class TeacherListResponse(BaseModel):
    """Teachers of a school."""

    items: list[UserResponse]
    total: int
