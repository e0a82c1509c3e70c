"""
Playlist I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel
from .songs import PlaylistSongDto
from .users import UserDto


class PlaylistCreate(ApiModel):
    """Schema for creating a playlist. The caller becomes its host."""

    name: Optional[str] = Field(default=None, description="Playlist name")
    description: Optional[str] = Field(default=None, description="Playlist description")
    cover_image: Optional[str] = Field(default=None, description="Cover image URL")


class PlaylistUpdate(ApiModel):
    """Schema for replacing a playlist's editable fields."""

    name: str = Field(description="Playlist name")
    description: Optional[str] = None
    cover_image: Optional[str] = None


class PlaylistPatch(ApiModel):
    """Schema for partially editing a playlist. Only provided fields change."""

    name: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None


class PlaylistRead(ApiModel):
    """Schema for reading a playlist from the API."""

    id: int
    name: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    host_id: int
    created_at: datetime
    host: Optional[UserDto] = None
    collaborators: List[UserDto] = Field(default_factory=list)
    songs: List[PlaylistSongDto] = Field(default_factory=list)
