"""
Collaborative playlist service.

Two concerns live here:

- Permission rules for shared playlists. Only the host manages collaborators;
  the host and collaborators may add and remove songs.
- Live session presence. Users "join" a playlist while they have it open and
  "leave" when they close it. Presence is kept in memory by
  ``PlaylistSessionTracker``, one process-wide instance shared by all requests,
  and entries that stop refreshing expire after the configured timeout.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from musichub.core.database.base import utc_now_naive
from musichub.core.database.entities.playlists import PlaylistSong
from musichub.core.database.entities.users import User
from musichub.core.database.repositories.playlists import PlaylistRepository
from musichub.core.database.repositories.songs import SongRepository
from musichub.core.database.repositories.users import UserRepository
from musichub.core.logging_config import get_logger
from musichub.core.models.io.collaboration import ActiveUserDto
from musichub.core.models.io.users import UserDto

logger = get_logger(__name__)

OperationResult = Tuple[bool, Optional[str]]


class PlaylistSessionTracker:
    """In-memory registry of who is currently inside which playlist.

    Maps ``playlist_id -> {user_id: last_seen}``. Every mutation happens under
    a single ``asyncio.Lock``.
    """

    def __init__(self, timeout: timedelta, clock: Callable[[], datetime] = utc_now_naive) -> None:
        self.timeout = timeout
        self._clock = clock
        self._sessions: Dict[int, Dict[int, datetime]] = {}
        self._lock = asyncio.Lock()

    async def join(self, playlist_id: int, user_id: int) -> None:
        """Register ``user_id`` in the playlist or refresh its last-seen time."""
        async with self._lock:
            self._sessions.setdefault(playlist_id, {})[user_id] = self._clock()

    async def leave(self, playlist_id: int, user_id: int) -> None:
        """Remove ``user_id`` from the playlist. Unknown sessions are ignored."""
        async with self._lock:
            users = self._sessions.get(playlist_id)
            if users is None:
                return
            users.pop(user_id, None)
            if not users:
                del self._sessions[playlist_id]

    async def active(self, playlist_id: int) -> Dict[int, datetime]:
        """Snapshot of non-expired users in the playlist."""
        cutoff = self._clock() - self.timeout
        async with self._lock:
            users = self._sessions.get(playlist_id, {})
            return {user_id: seen for user_id, seen in users.items() if seen >= cutoff}

    async def cleanup(self) -> int:
        """Drop expired entries and empty playlists.

        Returns:
            Number of removed user entries
        """
        cutoff = self._clock() - self.timeout
        removed = 0
        async with self._lock:
            for playlist_id in list(self._sessions):
                users = self._sessions[playlist_id]
                for user_id in [uid for uid, seen in users.items() if seen < cutoff]:
                    del users[user_id]
                    removed += 1
                if not users:
                    del self._sessions[playlist_id]
        return removed


class CollaborativePlaylistService:
    """Collaborator management, collaborative song editing and session presence."""

    def __init__(
        self,
        playlists: PlaylistRepository,
        users: UserRepository,
        songs: SongRepository,
        tracker: PlaylistSessionTracker,
    ) -> None:
        self.playlists = playlists
        self.users = users
        self.songs = songs
        self.tracker = tracker

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    async def get_collaborators(self, playlist_id: int) -> Optional[List[UserDto]]:
        details = await self.playlists.get_by_id_with_details(playlist_id)
        if details is None:
            return None
        return [UserDto.model_validate(user) for user in details.collaborators]

    async def add_collaborator_by_username(
        self, playlist_id: int, username: str, requester_id: int
    ) -> OperationResult:
        try:
            user = await self.users.get_by_username(username.strip())
            return await self._add_collaborator(playlist_id, user, requester_id)
        except Exception as e:
            logger.error(f"Adding collaborator '{username}' to playlist {playlist_id} failed: {e}", exc_info=True)
            return False, "An error occurred while adding collaborator."

    async def add_collaborator(self, playlist_id: int, user_id: int, requester_id: int) -> OperationResult:
        try:
            user = await self.users.get_by_id(user_id)
            return await self._add_collaborator(playlist_id, user, requester_id)
        except Exception as e:
            logger.error(f"Adding collaborator {user_id} to playlist {playlist_id} failed: {e}", exc_info=True)
            return False, "An error occurred while adding collaborator."

    async def _add_collaborator(self, playlist_id: int, user: Optional[User], requester_id: int) -> OperationResult:
        details = await self.playlists.get_by_id_with_details(playlist_id)
        if details is None:
            return False, "Playlist not found"
        if not details.is_host(requester_id):
            return False, "Only host can add collaborators"
        if user is None:
            return False, "User not found"
        if details.is_host(user.id):
            return False, "User is already the owner of this playlist"
        if user.id in details.collaborator_ids:
            return False, "User is already a collaborator"

        await self.playlists.add_collaborator(playlist_id, user.id)
        logger.info(f"User {user.id} added as collaborator to playlist {playlist_id}")
        return True, None

    async def remove_collaborator(self, playlist_id: int, user_id: int, requester_id: int) -> OperationResult:
        try:
            details = await self.playlists.get_by_id_with_details(playlist_id)
            if details is None:
                return False, "Playlist not found"
            if not details.is_host(requester_id):
                return False, "Only host can remove collaborators"
            if user_id not in details.collaborator_ids:
                return False, "Collaborator not found"

            await self.playlists.remove_collaborator(playlist_id, user_id)
            logger.info(f"User {user_id} removed from playlist {playlist_id}")
            return True, None
        except Exception as e:
            logger.error(f"Removing collaborator {user_id} from playlist {playlist_id} failed: {e}", exc_info=True)
            return False, "An error occurred while removing collaborator."

    async def can_access_playlist(self, playlist_id: int, user_id: int) -> bool:
        details = await self.playlists.get_by_id_with_details(playlist_id)
        return details is not None and details.is_member(user_id)

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------

    async def add_song(self, playlist_id: int, song_id: int, user_id: int) -> OperationResult:
        try:
            details = await self.playlists.get_by_id_with_details(playlist_id)
            if details is None:
                return False, "Playlist not found"
            if not details.is_member(user_id):
                return False, "Only host or collaborators can add songs"
            if await self.songs.get_by_id(song_id) is None:
                return False, "Song not found"
            if song_id in details.song_ids:
                return False, "Song is already in playlist"

            await self.playlists.add_playlist_song(
                PlaylistSong(
                    playlist_id=playlist_id,
                    song_id=song_id,
                    position=len(details.songs) + 1,
                    added_by_user_id=user_id,
                )
            )
            return True, None
        except Exception as e:
            logger.error(f"Adding song {song_id} to playlist {playlist_id} failed: {e}", exc_info=True)
            return False, "An error occurred while adding song."

    async def remove_song(self, playlist_id: int, song_id: int, user_id: int) -> OperationResult:
        try:
            details = await self.playlists.get_by_id_with_details(playlist_id)
            if details is None:
                return False, "Playlist not found"
            if not details.is_member(user_id):
                return False, "Only host or collaborators can remove songs"
            if song_id not in details.song_ids:
                return False, "Song not found in playlist"

            await self.playlists.remove_playlist_song(playlist_id, song_id)
            return True, None
        except Exception as e:
            logger.error(f"Removing song {song_id} from playlist {playlist_id} failed: {e}", exc_info=True)
            return False, "An error occurred while removing song."

    # ------------------------------------------------------------------
    # Session presence
    # ------------------------------------------------------------------

    async def join_playlist_session(self, playlist_id: int, user_id: int) -> None:
        await self.tracker.join(playlist_id, user_id)
        logger.debug(f"User {user_id} joined playlist session {playlist_id}")

    async def leave_playlist_session(self, playlist_id: int, user_id: int) -> None:
        await self.tracker.leave(playlist_id, user_id)
        logger.debug(f"User {user_id} left playlist session {playlist_id}")

    async def get_active_users(self, playlist_id: int) -> List[ActiveUserDto]:
        active = await self.tracker.active(playlist_id)
        if not active:
            return []
        users = await self.users.get_by_ids(list(active))
        return [
            ActiveUserDto(
                user_id=user.id,
                username=user.username,
                profile_image=user.profile_image,
                role=user.role,
                last_active=active[user.id],
            )
            for user in users
            if user.id in active
        ]

    async def cleanup_inactive_sessions(self) -> int:
        removed = await self.tracker.cleanup()
        if removed:
            logger.info(f"Removed {removed} inactive playlist session entries")
        return removed
