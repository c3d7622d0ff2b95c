# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SchoolTJ.

Each domain module provides a service that takes an AsyncSession and
encapsulates one area of business logic. Service errors inherit one of
the categories in src.domains.errors.

Domains:
    auth: Registration, login and profiles.
    school: Schools and their teachers.
    course: Courses and the course management policy.
    enrollment: Invitation and access-request lifecycle.
    student: Student linkage and "my students" listings.
"""
