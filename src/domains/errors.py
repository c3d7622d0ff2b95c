# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error categories.

Each service defines its own error hierarchy; every concrete error also
inherits exactly one of the categories below so the HTTP layer can map
it to a status code without knowing the service.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    pass


class UnauthorizedError(DomainError):
    """Caller's role or ownership does not permit the action."""

    pass


class NotFoundError(DomainError):
    """A referenced row does not exist (or is not visible to the caller)."""

    pass


class InvalidArgumentError(DomainError):
    """A required input is missing or malformed."""

    pass


class ConflictError(DomainError):
    """The action would duplicate an existing row."""

    pass


class InvalidStateError(DomainError):
    """The target row is not in a status that allows the action."""

    pass
