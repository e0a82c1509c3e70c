"""
Playlist service.

Playlist CRUD with host-only modification rules. Collaborator management and
collaborative song editing live in ``collaboration``.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from musichub.core.database.entities.playlists import Playlist
from musichub.core.database.repositories.playlists import PlaylistDetails, PlaylistRepository
from musichub.core.logging_config import get_logger
from musichub.core.models.io.playlists import PlaylistCreate, PlaylistPatch, PlaylistRead, PlaylistUpdate
from musichub.core.models.io.songs import PlaylistSongDto
from musichub.core.models.io.users import UserDto

from .songs import to_song_dto

logger = get_logger(__name__)

PlaylistResult = Tuple[bool, Optional[str], Optional[PlaylistRead]]


def _not_found(playlist_id: int) -> str:
    return f"Playlist with ID {playlist_id} not found."


def to_playlist_read(playlist: Playlist) -> PlaylistRead:
    return PlaylistRead(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        cover_image=playlist.cover_image,
        host_id=playlist.host_id,
        created_at=playlist.created_at,
    )


def details_to_playlist_read(details: PlaylistDetails) -> PlaylistRead:
    read = to_playlist_read(details.playlist)
    read.host = UserDto.model_validate(details.host) if details.host else None
    read.collaborators = [UserDto.model_validate(user) for user in details.collaborators]
    read.songs = [
        PlaylistSongDto(
            **to_song_dto(item.song, item.artists).model_dump(),
            position=item.entry.position,
            added_by_user_id=item.entry.added_by_user_id,
            added_at=item.entry.added_at,
        )
        for item in details.songs
    ]
    return read


class PlaylistService:
    """Business logic around playlists."""

    def __init__(self, playlists: PlaylistRepository) -> None:
        self.playlists = playlists

    async def get_all(self, user_id: int) -> List[PlaylistRead]:
        """Playlists hosted by or shared with ``user_id``."""
        return [to_playlist_read(p) for p in await self.playlists.get_for_user(user_id)]

    async def get_by_id(self, playlist_id: int) -> Optional[PlaylistRead]:
        details = await self.playlists.get_by_id_with_details(playlist_id)
        return details_to_playlist_read(details) if details else None

    async def create(self, dto: PlaylistCreate, host_id: int) -> PlaylistResult:
        name = (dto.name or "").strip()
        if not name:
            return False, "Playlist name is required", None
        playlist = await self.playlists.add(
            Playlist(name=name, description=dto.description, cover_image=dto.cover_image, host_id=host_id)
        )
        logger.info(f"User {host_id} created playlist {playlist.id}")
        return True, None, to_playlist_read(playlist)

    async def _load_for_host(
        self, playlist_id: int, user_id: int, action: str
    ) -> Tuple[Optional[Playlist], Optional[str]]:
        playlist = await self.playlists.get_by_id(playlist_id)
        if playlist is None:
            return None, _not_found(playlist_id)
        if playlist.host_id != user_id:
            return None, f"Only hosts can {action} this playlist."
        return playlist, None

    async def update(self, playlist_id: int, dto: PlaylistUpdate, user_id: int) -> PlaylistResult:
        """Replace name, description and cover image."""
        playlist, error = await self._load_for_host(playlist_id, user_id, "modify")
        if playlist is None:
            return False, error, None
        name = dto.name.strip()
        if not name:
            return False, "Playlist name is required", None
        playlist.name = name
        playlist.description = dto.description
        playlist.cover_image = dto.cover_image
        playlist = await self.playlists.update(playlist)
        return True, None, to_playlist_read(playlist)

    async def edit(self, playlist_id: int, patch: PlaylistPatch, user_id: int) -> PlaylistResult:
        """Apply only the fields present in ``patch``."""
        playlist, error = await self._load_for_host(playlist_id, user_id, "modify")
        if playlist is None:
            return False, error, None
        changes = patch.model_dump(exclude_unset=True)
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                return False, "Playlist name is required", None
            changes["name"] = name
        for key, value in changes.items():
            setattr(playlist, key, value)
        playlist = await self.playlists.update(playlist)
        return True, None, to_playlist_read(playlist)

    async def delete(self, playlist_id: int, user_id: int) -> Tuple[bool, Optional[str]]:
        playlist, error = await self._load_for_host(playlist_id, user_id, "delete")
        if playlist is None:
            return False, error
        await self.playlists.delete(playlist_id)
        logger.info(f"User {user_id} deleted playlist {playlist_id}")
        return True, None

    async def remove_song_from_playlist(
        self, playlist_id: int, song_id: int, user_id: Optional[int] = None
    ) -> Tuple[bool, Optional[str]]:
        """
        Remove a song from a playlist.

        When ``user_id`` is given, only the host or a collaborator may remove songs.
        """
        details = await self.playlists.get_by_id_with_details(playlist_id)
        if details is None:
            return False, _not_found(playlist_id)
        if user_id is not None and not details.is_member(user_id):
            return False, "Only host or collaborators can remove songs"
        if not await self.playlists.remove_playlist_song(playlist_id, song_id):
            return False, f"Song with ID {song_id} not found in playlist."
        return True, None
