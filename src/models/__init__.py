# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response models shared by services and routes."""

from src.models.common import EnrollmentStatus, MessageResponse, UserRole

__all__ = [
    "EnrollmentStatus",
    "MessageResponse",
    "UserRole",
]
