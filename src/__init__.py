"""SchoolTJ Backend.

School management platform: schools, teachers, students, courses and the
enrollment workflows that connect them.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
