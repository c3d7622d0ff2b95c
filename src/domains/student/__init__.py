# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student domain package."""

from src.domains.student.service import StudentService

__all__ = ["StudentService"]
