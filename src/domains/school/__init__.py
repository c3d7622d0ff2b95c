# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School domain package.

This package provides school management functionality including:
- School lookup by admin
- Teacher accounts attached to a school
"""

from src.domains.school.service import (
    SchoolNotFoundError,
    SchoolService,
    SchoolServiceError,
)

__all__ = [
    "SchoolService",
    "SchoolServiceError",
    "SchoolNotFoundError",
]
