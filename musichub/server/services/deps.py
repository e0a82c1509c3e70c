"""
Service Dependencies.

FastAPI dependency providers for repositories, services and the authenticated
caller. Repositories and services are built per request on the request's
``AsyncSession``; the token service, the Spotify client and the playlist
session tracker are process-wide singletons.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from musichub.core.database import RepositoryBundle, build_repositories, get_session
from musichub.core.database.entities.users import UserRole
from musichub.core.logging_config import get_logger
from musichub.server.core.config import settings

from .auth import AuthService
from .collaboration import CollaborativePlaylistService, PlaylistSessionTracker
from .playlists import PlaylistService
from .reactions import ReactionService
from .songs import SongService
from .spotify import SpotifyService
from .token import TokenClaims, TokenService
from .users import UserService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Global singletons
_token_service: Optional[TokenService] = None
_spotify_service: Optional[SpotifyService] = None
_session_tracker: Optional[PlaylistSessionTracker] = None


def get_token_service() -> TokenService:
    global _token_service
    if _token_service is None:
        _token_service = TokenService(settings.jwt)
    return _token_service


def get_spotify_service() -> SpotifyService:
    global _spotify_service
    if _spotify_service is None:
        _spotify_service = SpotifyService(settings.spotify)
    return _spotify_service


def get_session_tracker() -> PlaylistSessionTracker:
    global _session_tracker
    if _session_tracker is None:
        timeout = timedelta(minutes=settings.collaboration.session_timeout_minutes)
        _session_tracker = PlaylistSessionTracker(timeout)
    return _session_tracker


async def close_spotify_service() -> None:
    """Close the shared Spotify HTTP client if it was created."""
    global _spotify_service
    if _spotify_service is not None:
        await _spotify_service.aclose()
        _spotify_service = None


# ----------------------------------------------------------------------
# Authentication
# ----------------------------------------------------------------------


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_claims(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Resolve the caller from the ``Authorization: Bearer`` header (401 if absent or invalid)."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    try:
        return tokens.read_claims(credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise _unauthorized("Invalid token") from e


async def get_current_user_id(claims: Annotated[TokenClaims, Depends(get_current_claims)]) -> int:
    return claims.user_id


async def require_admin(claims: Annotated[TokenClaims, Depends(get_current_claims)]) -> TokenClaims:
    if claims.role != UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return claims


CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
AdminClaims = Annotated[TokenClaims, Depends(require_admin)]


# ----------------------------------------------------------------------
# Repositories & services
# ----------------------------------------------------------------------


def get_repositories(session: Annotated[AsyncSession, Depends(get_session)]) -> RepositoryBundle:
    return build_repositories(session)


Repositories = Annotated[RepositoryBundle, Depends(get_repositories)]


def get_auth_service(
    repos: Repositories, tokens: Annotated[TokenService, Depends(get_token_service)]
) -> AuthService:
    return AuthService(repos.users, tokens)


def get_user_service(repos: Repositories) -> UserService:
    return UserService(repos.users, settings.uploads)


def get_playlist_service(repos: Repositories) -> PlaylistService:
    return PlaylistService(repos.playlists)


def get_song_service(
    repos: Repositories, spotify: Annotated[SpotifyService, Depends(get_spotify_service)]
) -> SongService:
    return SongService(repos.songs, repos.playlists, spotify)


def get_collaborative_service(
    repos: Repositories, tracker: Annotated[PlaylistSessionTracker, Depends(get_session_tracker)]
) -> CollaborativePlaylistService:
    return CollaborativePlaylistService(repos.playlists, repos.users, repos.songs, tracker)


def get_reaction_service(repos: Repositories) -> ReactionService:
    return ReactionService(repos.reactions, repos.users)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
PlaylistServiceDep = Annotated[PlaylistService, Depends(get_playlist_service)]
SongServiceDep = Annotated[SongService, Depends(get_song_service)]
CollaborativeServiceDep = Annotated[CollaborativePlaylistService, Depends(get_collaborative_service)]
ReactionServiceDep = Annotated[ReactionService, Depends(get_reaction_service)]
SpotifyServiceDep = Annotated[SpotifyService, Depends(get_spotify_service)]
