# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for accounts:
- POST /register - Create an account
- POST /login - Exchange email and password for JWT tokens
- GET /me - Get current user profile
- PUT /me - Update name and email
- PUT /me/password - Change password
- GET /users - Search accounts by name or email (staff)

Example:
    POST /api/v1/auth/login
    Body:
        {"email": "teacher@school.tj", "password": "secret1"}
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from src.api.dependencies import get_auth_service, require_auth, require_staff
from src.api.errors import domain_error_to_http
from src.api.middleware.auth import CurrentUser
from src.api.middleware.rate_limit import get_ip_only, limiter, login_limit
from src.domains.auth.service import AuthService, InvalidCredentialsError
from src.domains.errors import DomainError
from src.models.auth import (
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
    UserSearchResponse,
)
from src.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account. The role cannot be changed later.",
)
@limiter.limit(login_limit, key_func=get_ip_only)
async def register(
    request: Request,
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Register a new account.

    School admins get a school, teachers a teacher profile and students a
    student profile.
    """
    try:
        user = await auth_service.register(
            email=data.email,
            password=data.password,
            role=data.role,
            name=data.name,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Authenticate with email and password and get access tokens.",
)
@limiter.limit(login_limit, key_func=get_ip_only)
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Authenticate a user.

    Raises:
        HTTPException: 401 if the credentials are wrong.
    """
    try:
        user, tokens = await auth_service.login(email=data.email, password=data.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_in=tokens.expires_in,
        user=UserResponse.model_validate(user),
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    current_user: CurrentUser = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Get the authenticated user's profile."""
    try:
        user = await auth_service.get_profile(current_user.id)
    except DomainError as e:
        raise domain_error_to_http(e)

    return UserResponse.model_validate(user)


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Update current user",
    description="Update name and email. The role is not editable.",
)
async def update_me(
    data: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Update the authenticated user's profile."""
    try:
        user = await auth_service.update_profile(
            user_id=current_user.id,
            name=data.name,
            email=data.email,
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return UserResponse.model_validate(user)


@router.put(
    "/me/password",
    response_model=MessageResponse,
    summary="Change password",
)
async def change_password(
    data: PasswordChangeRequest,
    current_user: CurrentUser = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Change the authenticated user's password.

    Raises:
        HTTPException: 400 if the current password is wrong.
    """
    try:
        await auth_service.change_password(
            user_id=current_user.id,
            current_password=data.current_password,
            new_password=data.new_password,
        )
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    except DomainError as e:
        raise domain_error_to_http(e)

    return MessageResponse(message="Password changed")


@router.get(
    "/users",
    response_model=UserSearchResponse,
    summary="Search users",
    description="Accounts of any role whose name or email contains q. Staff only.",
)
async def search_users(
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(default=20, ge=1, le=100),
    current_user: CurrentUser = Depends(require_staff),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserSearchResponse:
    users = await auth_service.search_users(q, limit=limit)
    return UserSearchResponse(items=[UserResponse.model_validate(u) for u in users])
