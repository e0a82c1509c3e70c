"""
Collaborative playlist I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from musichub.core.database.entities.users import UserRole

from .base import ApiModel


class AddCollaboratorRequest(ApiModel):
    username: Optional[str] = None


class CollaborativeSongRequest(ApiModel):
    song_id: int = 0


class AccessResponse(ApiModel):
    has_access: bool


class ActiveUserDto(ApiModel):
    """User currently present in a playlist session."""

    user_id: int
    username: str = ""
    profile_image: Optional[str] = None
    role: Optional[UserRole] = None
    last_active: Optional[datetime] = None
