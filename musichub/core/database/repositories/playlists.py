"""
Playlist repository.

Data access for playlists, their collaborators and their songs. Besides the
plain CRUD surface, ``get_by_id_with_details`` assembles everything permission
checks need (host, collaborators, songs with artists) in a handful of queries,
without relying on lazy-loaded relationships that would not work on an async
session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.playlists import Playlist, PlaylistCollaborator, PlaylistSong
from ..entities.reactions import PlaylistSongReaction
from ..entities.songs import Artist, Song, SongArtist
from ..entities.users import User
from .base import AsyncBaseRepository


@dataclass
class PlaylistSongDetails:
    """A playlist entry joined with its song and artists."""

    entry: PlaylistSong
    song: Song
    artists: List[Artist] = field(default_factory=list)


@dataclass
class PlaylistDetails:
    """A playlist with its host, collaborators and songs loaded."""

    playlist: Playlist
    host: Optional[User] = None
    collaborators: List[User] = field(default_factory=list)
    songs: List[PlaylistSongDetails] = field(default_factory=list)

    @property
    def collaborator_ids(self) -> List[int]:
        return [user.id for user in self.collaborators]

    @property
    def song_ids(self) -> List[int]:
        return [item.song.id for item in self.songs]

    def is_host(self, user_id: int) -> bool:
        return self.playlist.host_id == user_id

    def is_member(self, user_id: int) -> bool:
        """Host or collaborator."""
        return self.is_host(user_id) or user_id in self.collaborator_ids


class PlaylistRepository(AsyncBaseRepository[Playlist]):
    """Repository for playlist data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Playlist)

    async def get_all(self) -> List[Playlist]:
        stmt = select(Playlist).order_by(col(Playlist.created_at).desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, user_id: int) -> List[Playlist]:
        """Get playlists the user hosts or collaborates on, newest first.

        Args:
            user_id: User ID

        Returns:
            List of Playlist instances
        """
        collaborating = select(PlaylistCollaborator.playlist_id).where(PlaylistCollaborator.user_id == user_id)
        stmt = (
            select(Playlist)
            .where(or_(Playlist.host_id == user_id, col(Playlist.id).in_(collaborating)))
            .order_by(col(Playlist.created_at).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id_with_details(self, playlist_id: int) -> Optional[PlaylistDetails]:
        """Get a playlist together with host, collaborators and songs.

        Args:
            playlist_id: Playlist ID

        Returns:
            PlaylistDetails or None if the playlist does not exist
        """
        playlist = await self.get_by_id(playlist_id)
        if playlist is None:
            return None

        host = await self.session.get(User, playlist.host_id)
        collaborators = await self.get_collaborators(playlist_id)

        songs_stmt = (
            select(PlaylistSong, Song)
            .join(Song, col(Song.id) == col(PlaylistSong.song_id))
            .where(PlaylistSong.playlist_id == playlist_id)
            .order_by(col(PlaylistSong.position))
        )
        rows = (await self.session.execute(songs_stmt)).all()
        artists_by_song = await self._artists_for_songs([song.id for _, song in rows])

        return PlaylistDetails(
            playlist=playlist,
            host=host,
            collaborators=collaborators,
            songs=[
                PlaylistSongDetails(entry=entry, song=song, artists=artists_by_song.get(song.id, []))
                for entry, song in rows
            ],
        )

    async def _artists_for_songs(self, song_ids: List[int]) -> Dict[int, List[Artist]]:
        if not song_ids:
            return {}
        stmt = (
            select(SongArtist.song_id, Artist)
            .join(Artist, col(Artist.id) == col(SongArtist.artist_id))
            .where(col(SongArtist.song_id).in_(song_ids))
            .order_by(col(Artist.id))
        )
        grouped: Dict[int, List[Artist]] = {}
        for song_id, artist in (await self.session.execute(stmt)).all():
            grouped.setdefault(song_id, []).append(artist)
        return grouped

    async def delete(self, entity_id: int) -> bool:
        """Delete a playlist with its collaborators, songs entries and reactions.

        Args:
            entity_id: Playlist ID

        Returns:
            True if deleted, False if not found
        """
        playlist = await self.get_by_id(entity_id)
        if playlist is None:
            return False
        for model in (PlaylistSongReaction, PlaylistCollaborator, PlaylistSong):
            stmt = sa_delete(model).where(model.playlist_id == entity_id)
            await self.session.execute(stmt.execution_options(synchronize_session=False))
        await self.session.delete(playlist)
        await self.session.commit()
        return True

    # ------------------------------------------------------------------
    # Playlist songs
    # ------------------------------------------------------------------

    async def get_playlist_songs(self, playlist_id: int) -> List[PlaylistSong]:
        stmt = (
            select(PlaylistSong)
            .where(PlaylistSong.playlist_id == playlist_id)
            .order_by(col(PlaylistSong.position))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_playlist_song(self, playlist_id: int, song_id: int) -> Optional[PlaylistSong]:
        return await self.session.get(PlaylistSong, (playlist_id, song_id))

    async def add_playlist_song(self, entry: PlaylistSong) -> PlaylistSong:
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)
        return entry

    async def remove_playlist_song(self, playlist_id: int, song_id: int) -> bool:
        """Remove a song from a playlist.

        Args:
            playlist_id: Playlist ID
            song_id: Song ID

        Returns:
            True if the entry existed and was removed
        """
        entry = await self.get_playlist_song(playlist_id, song_id)
        if entry is None:
            return False
        await self.session.delete(entry)
        await self.session.commit()
        return True

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    async def get_collaborators(self, playlist_id: int) -> List[User]:
        stmt = (
            select(User)
            .join(PlaylistCollaborator, col(PlaylistCollaborator.user_id) == col(User.id))
            .where(PlaylistCollaborator.playlist_id == playlist_id)
            .order_by(col(User.username))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_collaborator(self, playlist_id: int, user_id: int) -> None:
        self.session.add(PlaylistCollaborator(playlist_id=playlist_id, user_id=user_id))
        await self.session.commit()

    async def remove_collaborator(self, playlist_id: int, user_id: int) -> bool:
        link = await self.session.get(PlaylistCollaborator, (playlist_id, user_id))
        if link is None:
            return False
        await self.session.delete(link)
        await self.session.commit()
        return True
