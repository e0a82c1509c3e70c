"""
I/O schemas for API requests and responses.

These models define the contract between the API and its clients. They are
kept separate from the database entities so the wire format can evolve
independently from the tables.
"""

from .auth import LoginRequest, LoginResponse, RegisterRequest
from .base import ApiModel, MessageResponse
from .collaboration import AccessResponse, ActiveUserDto, AddCollaboratorRequest, CollaborativeSongRequest
from .playlists import PlaylistCreate, PlaylistPatch, PlaylistRead, PlaylistUpdate
from .reactions import SongReactionSummaryDto, ToggleReactionRequest
from .songs import AddSongToPlaylistRequest, ArtistDto, PlaylistSongDto, SongAddedResponse, SongDto
from .spotify import (
    SpotifyCallbackRequest,
    SpotifyLoginUrlResponse,
    SpotifyRefreshRequest,
    SpotifyTokenResult,
    SpotifyTokensResponse,
    SpotifyTrackDetails,
)
from .users import ChangeRoleRequest, UserDto, UserSearchResult

__all__ = [
    "AccessResponse",
    "ActiveUserDto",
    "AddCollaboratorRequest",
    "AddSongToPlaylistRequest",
    "ApiModel",
    "ArtistDto",
    "ChangeRoleRequest",
    "CollaborativeSongRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PlaylistCreate",
    "PlaylistPatch",
    "PlaylistRead",
    "PlaylistSongDto",
    "PlaylistUpdate",
    "RegisterRequest",
    "SongAddedResponse",
    "SongDto",
    "SongReactionSummaryDto",
    "SpotifyCallbackRequest",
    "SpotifyLoginUrlResponse",
    "SpotifyRefreshRequest",
    "SpotifyTokenResult",
    "SpotifyTokensResponse",
    "SpotifyTrackDetails",
    "ToggleReactionRequest",
    "UserDto",
    "UserSearchResult",
]
