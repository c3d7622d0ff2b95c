# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation of domain errors into HTTP errors."""

from fastapi import HTTPException, status

from src.domains.errors import (
    ConflictError,
    DomainError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)


def domain_error_to_http(error: DomainError) -> HTTPException:
    """Build the HTTPException for a domain error category.

    The error message becomes the response detail.
    """
    match error:
        case UnauthorizedError():
            status_code = status.HTTP_403_FORBIDDEN
        case NotFoundError():
            status_code = status.HTTP_404_NOT_FOUND
        case InvalidArgumentError():
            status_code = status.HTTP_400_BAD_REQUEST
        case ConflictError() | InvalidStateError():
            status_code = status.HTTP_409_CONFLICT
        case _:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return HTTPException(status_code=status_code, detail=str(error))
