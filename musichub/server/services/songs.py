"""
Song service.

Lists and deletes songs, and imports Spotify tracks into playlists. Adding a
track resolves its details through ``SpotifyService`` first, then stores it
(or refreshes the stored copy) together with its artists before appending it
to the playlist.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from musichub.core.database.entities.playlists import PlaylistSong
from musichub.core.database.entities.songs import Artist, Song
from musichub.core.database.repositories.playlists import PlaylistRepository
from musichub.core.database.repositories.songs import SongRepository
from musichub.core.logging_config import get_logger
from musichub.core.models.io.songs import AddSongToPlaylistRequest, ArtistDto, SongDto

from .spotify import SpotifyService

logger = get_logger(__name__)


def format_duration(duration_seconds: Optional[int]) -> Optional[str]:
    """Format a duration in seconds as ``m:ss``."""
    if duration_seconds is None:
        return None
    minutes, seconds = divmod(int(duration_seconds), 60)
    return f"{minutes}:{seconds:02d}"


def to_song_dto(song: Song, artists: Sequence[Artist] = ()) -> SongDto:
    return SongDto(
        id=song.id,
        title=song.title,
        album=song.album,
        duration_ms=song.duration_seconds * 1000 if song.duration_seconds is not None else None,
        duration_formatted=format_duration(song.duration_seconds),
        spotify_id=song.spotify_id,
        spotify_uri=song.spotify_uri,
        artists=[ArtistDto(id=artist.id, name=artist.name) for artist in artists],
    )


class SongService:
    """Business logic around songs."""

    def __init__(self, songs: SongRepository, playlists: PlaylistRepository, spotify: SpotifyService) -> None:
        self.songs = songs
        self.playlists = playlists
        self.spotify = spotify

    async def get_all(self) -> List[SongDto]:
        return [to_song_dto(item.song, item.artists) for item in await self.songs.get_all()]

    async def get_by_id(self, song_id: int) -> Optional[SongDto]:
        item = await self.songs.get_with_artists(song_id)
        return to_song_dto(item.song, item.artists) if item else None

    async def delete(self, song_id: int) -> Tuple[bool, Optional[str]]:
        if not await self.songs.delete(song_id):
            return False, f"Song with ID {song_id} not found."
        logger.info(f"Deleted song {song_id}")
        return True, None

    async def add_song_to_playlist(
        self, dto: AddSongToPlaylistRequest, user_id: Optional[int] = None
    ) -> Tuple[bool, Optional[str], Optional[int]]:
        """
        Import a Spotify track and append it to a playlist.

        Args:
            dto: Target playlist and Spotify track ID
            user_id: User adding the song, recorded on the playlist entry

        Returns:
            ``(success, error, song_id)``
        """
        playlist = await self.playlists.get_by_id(dto.playlist_id)
        if playlist is None:
            return False, f"Playlist with ID {dto.playlist_id} not found.", None

        spotify_id = (dto.spotify_id or "").strip()
        if not spotify_id:
            return False, "SpotifyId is required to add a track.", None

        ok, details, error = await self.spotify.get_track_details(spotify_id)
        if not ok or details is None:
            return False, f"Failed to retrieve song details from Spotify: {error}", None
        if not details.id:
            return False, "Spotify returned invalid track ID.", None
        if not details.uri:
            return False, "Spotify returned invalid track URI.", None

        song = await self.songs.ensure_song_with_artists(
            title=details.name,
            album=details.album.name if details.album else None,
            duration_seconds=details.duration_ms // 1000 if details.duration_ms else None,
            artist_names=[artist.name for artist in details.artists],
            spotify_id=details.id,
            spotify_uri=details.uri,
        )

        existing = await self.playlists.get_playlist_songs(playlist.id)
        if any(entry.song_id == song.id for entry in existing):
            return False, "This song is already in the playlist.", song.id

        await self.playlists.add_playlist_song(
            PlaylistSong(
                playlist_id=playlist.id,
                song_id=song.id,
                position=len(existing) + 1,
                added_by_user_id=user_id,
            )
        )
        logger.info(f"Added song {song.id} to playlist {playlist.id}")
        return True, None, song.id
