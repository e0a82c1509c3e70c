"""
Song and artist entity models.

Songs are usually imported from Spotify and keep the Spotify identifiers so a
track added twice resolves to the same row. Artists are shared between songs
through the ``song_artists`` link table.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import Base


class Artist(Base, table=True):
    """Performing artist.

    Table: artists
    """

    __tablename__ = "artists"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=200)

    def __repr__(self) -> str:
        return f"Artist(id={self.id}, name={self.name})"


class SongBase(Base):
    """Base fields for song."""

    title: str = Field(max_length=300, description="Track title")
    album: Optional[str] = Field(default=None, max_length=300, description="Album name")
    duration_seconds: Optional[int] = Field(default=None, description="Track length in whole seconds")
    spotify_id: Optional[str] = Field(default=None, index=True, description="Spotify track ID")
    spotify_uri: Optional[str] = Field(default=None, description="Spotify track URI")


class Song(SongBase, table=True):
    """Track that can be placed in playlists.

    Table: songs
    """

    __tablename__ = "songs"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)

    def __repr__(self) -> str:
        return f"Song(id={self.id}, title={self.title}, spotify_id={self.spotify_id})"


class SongArtist(Base, table=True):
    """Link between a song and one of its artists.

    Table: song_artists
    """

    __tablename__ = "song_artists"
    __table_args__ = ({"extend_existing": True},)

    song_id: int = Field(foreign_key="songs.id", primary_key=True)
    artist_id: int = Field(foreign_key="artists.id", primary_key=True)
