"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides async data access operations for its entity models.

Modules:
- base: AsyncBaseRepository and QueryBuilder utilities
- users: User accounts, username search
- playlists: Playlists, collaborators and playlist songs
- songs: Songs and artists
- reactions: Likes and dislikes on playlist songs
"""

from .base import AsyncBaseRepository, QueryBuilder
from .playlists import PlaylistDetails, PlaylistRepository, PlaylistSongDetails
from .reactions import ReactionRepository
from .songs import SongRepository, SongWithArtists
from .users import UserRepository

__all__ = [
    "AsyncBaseRepository",
    "PlaylistDetails",
    "PlaylistRepository",
    "PlaylistSongDetails",
    "QueryBuilder",
    "ReactionRepository",
    "SongRepository",
    "SongWithArtists",
    "UserRepository",
]
