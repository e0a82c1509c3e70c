"""
Playlist entity models.

A playlist has exactly one host (its owner), any number of collaborators
stored in ``playlist_users`` and an ordered list of songs stored in
``playlist_songs``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now_naive


class PlaylistBase(Base):
    """Base fields for playlist."""

    name: str = Field(max_length=200, description="Playlist name")
    description: Optional[str] = Field(default=None, description="Playlist description")
    cover_image: Optional[str] = Field(default=None, description="Cover image URL")


class Playlist(PlaylistBase, table=True):
    """Playlist owned by a host user.

    Table: playlists
    """

    __tablename__ = "playlists"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    host_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)

    def __repr__(self) -> str:
        return f"Playlist(id={self.id}, name={self.name}, host_id={self.host_id})"


class PlaylistCollaborator(Base, table=True):
    """Collaborator granted edit rights on a playlist.

    Table: playlist_users
    """

    __tablename__ = "playlist_users"
    __table_args__ = ({"extend_existing": True},)

    playlist_id: int = Field(foreign_key="playlists.id", primary_key=True)
    user_id: int = Field(foreign_key="users.id", primary_key=True)


class PlaylistSong(Base, table=True):
    """Song entry within a playlist.

    Table: playlist_songs
    """

    __tablename__ = "playlist_songs"
    __table_args__ = ({"extend_existing": True},)

    playlist_id: int = Field(foreign_key="playlists.id", primary_key=True)
    song_id: int = Field(foreign_key="songs.id", primary_key=True)
    position: int = Field(default=1, description="1-based position within the playlist")
    added_by_user_id: Optional[int] = Field(default=None, foreign_key="users.id")
    added_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return f"PlaylistSong(playlist_id={self.playlist_id}, song_id={self.song_id}, position={self.position})"
