"""
Service layer.

Each service wraps one or more repositories and holds the business rules of
its area. Routers depend on services through the providers in ``deps``.
"""

from .auth import AuthService
from .collaboration import CollaborativePlaylistService, PlaylistSessionTracker
from .playlists import PlaylistService
from .reactions import ReactionService
from .songs import SongService
from .spotify import SpotifyService
from .token import TokenClaims, TokenService
from .users import UserService

__all__ = [
    "AuthService",
    "CollaborativePlaylistService",
    "PlaylistService",
    "PlaylistSessionTracker",
    "ReactionService",
    "SongService",
    "SpotifyService",
    "TokenClaims",
    "TokenService",
    "UserService",
]
