# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

This module provides JWT token creation and validation using python-jose.
Access tokens carry the user id (``sub``), email and role; refresh tokens
carry only the user id.

Example:
    >>> from src.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> tokens = jwt_manager.create_token_pair(user_id="user-123", email="a@b.c", role="teacher")
    >>> claims = jwt_manager.decode_token(tokens.access_token, expected_type="access")
"""

import logging
import secrets
from datetime import timedelta
from typing import Literal

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, ValidationError

from src.core.config.settings import JWTSettings
from src.models.common import UserRole
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

TokenType = Literal["access", "refresh"]


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token type (access or refresh).
        email: User email (access tokens only).
        role: User role (access tokens only).
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    type: TokenType
    email: str | None = None
    role: UserRole | None = None
    exp: int
    iat: int
    jti: str


class TokenPair(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_expires_in: int


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    def create_token_pair(self, user_id: str, email: str, role: UserRole | str) -> TokenPair:
        """Create an access and refresh token pair.

        Args:
            user_id: User identifier.
            email: User email.
            role: User role.

        Returns:
            TokenPair with access and refresh tokens.
        """
        access_ttl = timedelta(minutes=self._settings.access_token_expire_minutes)
        refresh_ttl = timedelta(days=self._settings.refresh_token_expire_days)

        access_token = self._encode(
            {"sub": user_id, "email": email, "role": UserRole(role).value},
            token_type="access",
            ttl=access_ttl,
        )
        refresh_token = self._encode({"sub": user_id}, token_type="refresh", ttl=refresh_ttl)

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="Bearer",
            expires_in=int(access_ttl.total_seconds()),
            refresh_expires_in=int(refresh_ttl.total_seconds()),
        )

    def decode_token(self, token: str, expected_type: TokenType | None = None) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.
            expected_type: Expected token type (access or refresh).

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or of the wrong type.
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JoseJWTError as e:
            logger.debug("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        if expected_type and claims.get("type") != expected_type:
            raise InvalidTokenError(f"Expected {expected_type} token, got {claims.get('type')}")

        try:
            payload = TokenPayload.model_validate(claims)
        except ValidationError as e:
            raise InvalidTokenError(f"Invalid token claims: {e.error_count()} errors")

        if payload.type == "access" and payload.role is None:
            raise InvalidTokenError("Access token is missing the role claim")

        return payload

    def _encode(self, claims: dict, token_type: TokenType, ttl: timedelta) -> str:
        now = utc_now()
        payload = {
            **claims,
            "type": token_type,
            "exp": int((now + ttl).timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )
