"""
Song repository.

Data access for songs and their artists. ``ensure_song_with_artists`` is the
entry point used when a Spotify track is added to a playlist: it reuses the
song stored under the same Spotify ID and the artists stored under the same
name, so importing a track twice never duplicates rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from musichub.core.logging_config import get_logger

from ..entities.playlists import PlaylistSong
from ..entities.reactions import PlaylistSongReaction
from ..entities.songs import Artist, Song, SongArtist
from .base import AsyncBaseRepository

logger = get_logger(__name__)


@dataclass
class SongWithArtists:
    """A song together with its artists."""

    song: Song
    artists: List[Artist] = field(default_factory=list)


def normalize_artist_names(names: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Strip names, drop blanks and remove case-insensitive duplicates, keeping order."""
    seen = set()
    cleaned: List[str] = []
    for name in names or []:
        if name is None:
            continue
        stripped = name.strip()
        if not stripped or stripped.lower() in seen:
            continue
        seen.add(stripped.lower())
        cleaned.append(stripped)
    return cleaned


class SongRepository(AsyncBaseRepository[Song]):
    """Repository for song data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Song)

    async def get_all(self) -> List[SongWithArtists]:
        """Get all songs with their artists, ordered by ID."""
        result = await self.session.execute(select(Song).order_by(col(Song.id)))
        songs = list(result.scalars().all())
        artists = await self._artists_for_songs([song.id for song in songs])
        return [SongWithArtists(song=song, artists=artists.get(song.id, [])) for song in songs]

    async def get_with_artists(self, song_id: int) -> Optional[SongWithArtists]:
        song = await self.get_by_id(song_id)
        if song is None:
            return None
        artists = await self._artists_for_songs([song.id])
        return SongWithArtists(song=song, artists=artists.get(song.id, []))

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

    async def find_by_title_and_album(self, title: str, album: Optional[str]) -> Optional[Song]:
        """Find a song by exact title and album. A ``None`` album matches songs without album."""
        stmt = select(Song).where(Song.title == title)
        if album is None:
            stmt = stmt.where(col(Song.album).is_(None))
        else:
            stmt = stmt.where(Song.album == album)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_by_spotify_id(self, spotify_id: str) -> Optional[Song]:
        result = await self.session.execute(select(Song).where(Song.spotify_id == spotify_id))
        return result.scalars().first()

    async def get_or_create_artist(self, name: str) -> Artist:
        """Reuse an artist with the same name (case-insensitive) or create one."""
        stmt = select(Artist).where(func.lower(Artist.name) == name.lower())
        artist = (await self.session.execute(stmt)).scalars().first()
        if artist is None:
            artist = Artist(name=name)
            self.session.add(artist)
            await self.session.flush()
        return artist

    async def ensure_song_with_artists(
        self,
        title: str,
        album: Optional[str],
        duration_seconds: Optional[int],
        artist_names: Optional[Iterable[Optional[str]]],
        spotify_id: Optional[str] = None,
        spotify_uri: Optional[str] = None,
    ) -> Song:
        """Return the song for a Spotify track, creating it and its artists if needed.

        When a song with the same ``spotify_id`` already exists, its title, album,
        duration and URI are refreshed and it is returned as is. Otherwise a new
        song is created and linked to its artists. Artist names are stripped,
        blanks are dropped and duplicates are removed case-insensitively;
        existing artists are reused.

        Args:
            title: Track title
            album: Album name
            duration_seconds: Track length in seconds
            artist_names: Artist names as reported by Spotify
            spotify_id: Spotify track ID
            spotify_uri: Spotify track URI

        Returns:
            Persisted Song instance
        """
        if spotify_id:
            existing = await self.find_by_spotify_id(spotify_id)
            if existing is not None:
                existing.title = title
                existing.album = album
                existing.duration_seconds = duration_seconds
                if spotify_uri:
                    existing.spotify_uri = spotify_uri
                logger.debug(f"Reusing song {existing.id} for spotify track {spotify_id}")
                return await self.update(existing)

        song = Song(
            title=title,
            album=album,
            duration_seconds=duration_seconds,
            spotify_id=spotify_id,
            spotify_uri=spotify_uri,
        )
        self.session.add(song)
        await self.session.flush()

        for name in normalize_artist_names(artist_names):
            artist = await self.get_or_create_artist(name)
            self.session.add(SongArtist(song_id=song.id, artist_id=artist.id))

        await self.session.commit()
        await self.session.refresh(song)
        logger.info(f"Created song {song.id} ({title}) for spotify track {spotify_id}")
        return song

    async def delete(self, entity_id: int) -> bool:
        """Delete a song with its artist links, playlist entries and reactions.

        Args:
            entity_id: Song ID

        Returns:
            True if deleted, False if not found
        """
        song = await self.get_by_id(entity_id)
        if song is None:
            return False
        for model in (PlaylistSongReaction, PlaylistSong, SongArtist):
            stmt = sa_delete(model).where(model.song_id == entity_id)
            await self.session.execute(stmt.execution_options(synchronize_session=False))
        await self.session.delete(song)
        await self.session.commit()
        return True
