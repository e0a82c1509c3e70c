"""Unit tests for the song repository against an in-memory database."""

from __future__ import annotations

import pytest
from sqlalchemy import func
from sqlmodel import select

from musichub.core.database.entities import Artist, PlaylistSong, PlaylistSongReaction, Song, SongArtist
from musichub.core.database.repositories.songs import normalize_artist_names


@pytest.mark.parametrize(
    "names, expected",
    [
        ([" Daft Punk ", "daft punk", "", None, "Pharrell"], ["Daft Punk", "Pharrell"]),
        (None, []),
        (["   "], []),
    ],
)
def test_normalize_artist_names(names, expected):
    assert normalize_artist_names(names) == expected


class TestEnsureSongWithArtists:
    async def test_creates_song_and_links_artists(self, session, repos):
        song = await repos.songs.ensure_song_with_artists(
            title="Get Lucky",
            album="Random Access Memories",
            duration_seconds=369,
            artist_names=["Daft Punk", " daft punk ", "Pharrell Williams"],
            spotify_id="2Foc5Q5nqNiosCNqttzHof",
            spotify_uri="spotify:track:2Foc5Q5nqNiosCNqttzHof",
        )

        item = await repos.songs.get_with_artists(song.id)
        assert item.song.title == "Get Lucky"
        assert [a.name for a in item.artists] == ["Daft Punk", "Pharrell Williams"]

    async def test_reuses_existing_artists(self, session, repos):
        await repos.songs.ensure_song_with_artists("One", None, 100, ["Metallica"], spotify_id="s1")
        await repos.songs.ensure_song_with_artists("Two", None, 100, ["METALLICA"], spotify_id="s2")

        artists = (await session.execute(select(Artist))).scalars().all()
        assert [a.name for a in artists] == ["Metallica"]
        links = (await session.execute(select(func.count()).select_from(SongArtist))).scalar_one()
        assert links == 2

    async def test_same_spotify_id_refreshes_existing_song(self, session, repos):
        first = await repos.songs.ensure_song_with_artists("Old title", "Album", 100, ["A"], spotify_id="same")
        second = await repos.songs.ensure_song_with_artists(
            "New title", "Album", 120, ["A"], spotify_id="same", spotify_uri="spotify:track:same"
        )

        assert second.id == first.id
        assert second.title == "New title"
        assert second.duration_seconds == 120
        assert (await session.execute(select(func.count()).select_from(Song))).scalar_one() == 1


class TestSongQueries:
    async def test_find_by_title_and_album_handles_missing_album(self, repos, make_song):
        single = await make_song(title="Single", album=None)
        await make_song(title="Single", album="Compilation")

        assert (await repos.songs.find_by_title_and_album("Single", None)).id == single.id
        assert (await repos.songs.find_by_title_and_album("Single", "Compilation")).album == "Compilation"
        assert await repos.songs.find_by_title_and_album("Other", None) is None

    async def test_get_all_includes_artists(self, repos):
        await repos.songs.ensure_song_with_artists("Song", None, 60, ["Band"], spotify_id="x")

        items = await repos.songs.get_all()

        assert len(items) == 1
        assert items[0].artists[0].name == "Band"


class TestSongDelete:
    async def test_delete_removes_links(self, session, repos, make_user, make_playlist, add_to_playlist):
        user = await make_user("host")
        playlist = await make_playlist(user)
        song = await repos.songs.ensure_song_with_artists("Song", None, 60, ["Band"], spotify_id="x")
        await add_to_playlist(playlist, song)
        session.add(PlaylistSongReaction(playlist_id=playlist.id, song_id=song.id, user_id=user.id, is_like=True))
        await session.commit()

        assert await repos.songs.delete(song.id) is True
        assert await repos.songs.delete(song.id) is False

        for model in (Song, SongArtist, PlaylistSong, PlaylistSongReaction):
            assert (await session.execute(select(func.count()).select_from(model))).scalar_one() == 0
        # artists are shared and survive
        assert (await session.execute(select(func.count()).select_from(Artist))).scalar_one() == 1
