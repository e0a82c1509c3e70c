"""Shared fixtures for unit tests.

Provides an in-memory SQLite database with the full schema, a session bound
to it and small factories that persist users, playlists and songs.
"""

from __future__ import annotations

from typing import AsyncGenerator, Iterable, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from musichub.core.database import build_repositories, create_all, create_sessionmaker
from musichub.core.database.entities import Playlist, PlaylistCollaborator, PlaylistSong, Song, User, UserRole
from musichub.server.services.auth import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database engine for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession):
    return build_repositories(session)


@pytest.fixture
def make_user(session: AsyncSession):
    async def _make(
        username: str,
        password: str = "secret-password",
        role: UserRole = UserRole.USER,
        profile_image: Optional[str] = None,
    ) -> User:
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            profile_image=profile_image,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_playlist(session: AsyncSession):
    async def _make(host: User, name: str = "Road Trip", collaborators: Iterable[User] = ()) -> Playlist:
        playlist = Playlist(name=name, description="Songs for the road", host_id=host.id)
        session.add(playlist)
        await session.commit()
        await session.refresh(playlist)
        for user in collaborators:
            session.add(PlaylistCollaborator(playlist_id=playlist.id, user_id=user.id))
        await session.commit()
        return playlist

    return _make


@pytest.fixture
def make_song(session: AsyncSession):
    async def _make(
        title: str = "Blue in Green",
        album: Optional[str] = "Kind of Blue",
        spotify_id: Optional[str] = None,
        duration_seconds: Optional[int] = 337,
    ) -> Song:
        song = Song(
            title=title,
            album=album,
            duration_seconds=duration_seconds,
            spotify_id=spotify_id,
            spotify_uri=f"spotify:track:{spotify_id}" if spotify_id else None,
        )
        session.add(song)
        await session.commit()
        await session.refresh(song)
        return song

    return _make


@pytest.fixture
def add_to_playlist(session: AsyncSession):
    async def _add(playlist: Playlist, song: Song, position: int = 1, added_by: Optional[User] = None) -> PlaylistSong:
        entry = PlaylistSong(
            playlist_id=playlist.id,
            song_id=song.id,
            position=position,
            added_by_user_id=added_by.id if added_by else None,
        )
        session.add(entry)
        await session.commit()
        return entry

    return _add
