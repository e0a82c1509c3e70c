"""
User I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from musichub.core.database.entities.users import UserRole

from .base import ApiModel


class UserDto(ApiModel):
    """Public view of a user account."""

    id: int
    username: str
    role: UserRole
    profile_image: Optional[str] = Field(default=None, description="Public path of the profile image")


class UserSearchResult(ApiModel):
    """Projection returned by the username search."""

    id: int
    username: str


class ChangeRoleRequest(ApiModel):
    """Schema for changing a user's role."""

    role: UserRole
