# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication and profile request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.common import UserRole


class RegisterRequest(BaseModel):
    """Account registration request."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6, max_length=128, description="Password")
    role: UserRole = Field(..., description="Account role, fixed for the account lifetime")
    name: str | None = Field(default=None, max_length=255, description="Display name")


class LoginRequest(BaseModel):
    """Login request."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Password")


class ProfileUpdateRequest(BaseModel):
    """Profile update request. Role is deliberately absent."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole
    rating_avg: float = 0.0
    rating_count: int = 0
    created_at: datetime | None = None


class LoginResponse(BaseModel):
    """Tokens issued on successful login."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration in seconds")
    user: UserResponse


class PasswordChangeRequest(BaseModel):
    """Password change for the signed-in user."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class UserSearchResponse(BaseModel):
    """Accounts matching a name or email query."""

    items: list[UserResponse]
