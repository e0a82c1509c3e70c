"""
Authentication I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import Optional

from .base import ApiModel
from .users import UserDto


class LoginRequest(ApiModel):
    """Schema for logging in."""

    username: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(ApiModel):
    """Schema for creating an account."""

    username: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginResponse(ApiModel):
    """Bearer token issued after a successful login or registration."""

    token: str
    user: UserDto
