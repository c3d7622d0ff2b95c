# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    auth: Registration, login and profile endpoints.
    courses: Course creation, listing, invitations and access requests.
    enrollments: Student enrollments, decisions and invitation responses.
    schools: School teacher management.
    students: "My students" listing.
"""

from fastapi import APIRouter

from src.api.v1 import auth, courses, enrollments, schools, students

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(enrollments.router, tags=["Enrollments"])
router.include_router(schools.router, prefix="/schools", tags=["Schools"])
router.include_router(students.router, prefix="/students", tags=["Students"])

__all__ = ["router"]
