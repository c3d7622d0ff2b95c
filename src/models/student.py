# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student listing models."""

from pydantic import BaseModel

from src.models.auth import UserResponse


class StudentListResponse(BaseModel):
    """A page of students.

    For the directory, total counts every match rather than the page.
    """

    items: list[UserResponse]
    total: int
