"""
Song reaction entity model.

A user can like or dislike a song within a specific playlist. There is at most
one reaction per (playlist, song, user).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now_naive


class PlaylistSongReaction(Base, table=True):
    """Like or dislike left by a user on a playlist song.

    Table: playlist_song_reactions
    """

    __tablename__ = "playlist_song_reactions"
    __table_args__ = (
        UniqueConstraint("playlist_id", "song_id", "user_id", name="uq_reaction_playlist_song_user"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    playlist_id: int = Field(foreign_key="playlists.id", index=True)
    song_id: int = Field(foreign_key="songs.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    is_like: bool = Field(description="True for like, False for dislike")
    created_at: datetime = Field(default_factory=utc_now_naive)

    def __repr__(self) -> str:
        return (
            f"PlaylistSongReaction(id={self.id}, playlist_id={self.playlist_id}, "
            f"song_id={self.song_id}, user_id={self.user_id}, is_like={self.is_like})"
        )
