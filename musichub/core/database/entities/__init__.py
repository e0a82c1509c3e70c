"""
Database entity models.

This package contains all database entity models organized by business domain.

Modules:
- users: User accounts and roles
- playlists: Playlists, collaborators and playlist songs
- songs: Songs, artists and the song/artist link
- reactions: Likes and dislikes on playlist songs
"""

from .playlists import Playlist, PlaylistCollaborator, PlaylistSong
from .reactions import PlaylistSongReaction
from .songs import Artist, Song, SongArtist
from .users import User, UserRole

__all__ = [
    "Artist",
    "Playlist",
    "PlaylistCollaborator",
    "PlaylistSong",
    "PlaylistSongReaction",
    "Song",
    "SongArtist",
    "User",
    "UserRole",
]
