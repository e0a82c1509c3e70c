"""
Song I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel


class ArtistDto(ApiModel):
    id: int
    name: str


class SongDto(ApiModel):
    """Song with its artists and a display-friendly duration."""

    id: int
    title: str
    album: Optional[str] = None
    duration_ms: Optional[int] = Field(default=None, description="Duration in milliseconds")
    duration_formatted: Optional[str] = Field(default=None, description="Duration as m:ss")
    spotify_id: Optional[str] = None
    spotify_uri: Optional[str] = None
    artists: List[ArtistDto] = Field(default_factory=list)


class PlaylistSongDto(SongDto):
    """Song as it appears inside a playlist."""

    position: int
    added_by_user_id: Optional[int] = None
    added_at: Optional[datetime] = None


class AddSongToPlaylistRequest(ApiModel):
    """Schema for adding a Spotify track to a playlist."""

    playlist_id: int
    spotify_id: Optional[str] = None


class SongAddedResponse(ApiModel):
    message: str
    song_id: int
