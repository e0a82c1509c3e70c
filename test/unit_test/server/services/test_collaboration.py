"""Unit tests for collaborative playlist rules and session presence."""

from __future__ import annotations

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from musichub.server.services.collaboration import CollaborativePlaylistService, PlaylistSessionTracker


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tracker(clock) -> PlaylistSessionTracker:
    return PlaylistSessionTracker(timedelta(minutes=30), clock=clock)


@pytest.fixture
def service(repos, tracker) -> CollaborativePlaylistService:
    return CollaborativePlaylistService(repos.playlists, repos.users, repos.songs, tracker)


@pytest.fixture
async def shared(make_user, make_playlist):
    host = await make_user("host")
    friend = await make_user("friend")
    stranger = await make_user("stranger")
    playlist = await make_playlist(host, collaborators=[friend])
    return playlist, host, friend, stranger


class TestPlaylistSessionTracker:
    async def test_join_refreshes_and_leave_removes(self, tracker, clock):
        await tracker.join(1, 10)
        clock.advance(minutes=5)
        await tracker.join(1, 10)

        assert await tracker.active(1) == {10: clock.now}

        await tracker.leave(1, 10)
        await tracker.leave(1, 10)
        await tracker.leave(2, 99)
        assert await tracker.active(1) == {}

    async def test_expired_users_are_hidden_and_cleaned(self, tracker, clock):
        await tracker.join(1, 10)
        clock.advance(minutes=20)
        await tracker.join(1, 11)
        await tracker.join(2, 12)
        clock.advance(minutes=15)

        assert list(await tracker.active(1)) == [11]
        assert await tracker.cleanup() == 1

        clock.advance(minutes=31)
        assert await tracker.cleanup() == 2
        assert await tracker.active(1) == {}
        assert await tracker.active(2) == {}


class TestCollaborators:
    async def test_host_adds_collaborator_by_username(self, service, make_user, shared):
        playlist, host, _, _ = shared
        await make_user("newbie")

        assert await service.add_collaborator_by_username(playlist.id, " newbie ", host.id) == (True, None)
        assert [u.username for u in await service.get_collaborators(playlist.id)] == ["friend", "newbie"]

    async def test_add_collaborator_by_id(self, service, shared):
        playlist, host, _, stranger = shared

        assert await service.add_collaborator(playlist.id, stranger.id, host.id) == (True, None)

    @pytest.mark.parametrize(
        "who, requester, expected",
        [
            ("stranger", "friend", "Only host can add collaborators"),
            ("ghost", "host", "User not found"),
            ("host", "host", "User is already the owner of this playlist"),
            ("friend", "host", "User is already a collaborator"),
        ],
    )
    async def test_add_collaborator_rules(self, service, shared, who, requester, expected):
        playlist, host, friend, _ = shared
        requester_id = {"host": host.id, "friend": friend.id}[requester]

        assert await service.add_collaborator_by_username(playlist.id, who, requester_id) == (False, expected)

    async def test_add_collaborator_to_missing_playlist(self, service, shared):
        _, host, _, _ = shared

        assert await service.add_collaborator_by_username(404, "friend", host.id) == (False, "Playlist not found")

    async def test_add_collaborator_unexpected_error(self, tracker):
        users = AsyncMock()
        users.get_by_username.side_effect = RuntimeError("db down")
        service = CollaborativePlaylistService(AsyncMock(), users, AsyncMock(), tracker)

        assert await service.add_collaborator_by_username(1, "x", 1) == (
            False,
            "An error occurred while adding collaborator.",
        )

    async def test_remove_collaborator(self, service, shared):
        playlist, host, friend, stranger = shared

        assert await service.remove_collaborator(playlist.id, friend.id, friend.id) == (
            False,
            "Only host can remove collaborators",
        )
        assert await service.remove_collaborator(playlist.id, stranger.id, host.id) == (False, "Collaborator not found")
        assert await service.remove_collaborator(404, friend.id, host.id) == (False, "Playlist not found")
        assert await service.remove_collaborator(playlist.id, friend.id, host.id) == (True, None)
        assert await service.get_collaborators(playlist.id) == []

    async def test_get_collaborators_missing_playlist(self, service):
        assert await service.get_collaborators(404) is None

    async def test_can_access_playlist(self, service, shared):
        playlist, host, friend, stranger = shared

        assert await service.can_access_playlist(playlist.id, host.id)
        assert await service.can_access_playlist(playlist.id, friend.id)
        assert not await service.can_access_playlist(playlist.id, stranger.id)
        assert not await service.can_access_playlist(404, host.id)


class TestCollaborativeSongs:
    async def test_add_and_remove_song(self, service, repos, make_song, shared):
        playlist, _, friend, _ = shared
        song = await make_song()

        assert await service.add_song(playlist.id, song.id, friend.id) == (True, None)
        entry = await repos.playlists.get_playlist_song(playlist.id, song.id)
        assert (entry.position, entry.added_by_user_id) == (1, friend.id)
        assert await service.add_song(playlist.id, song.id, friend.id) == (False, "Song is already in playlist")

        assert await service.remove_song(playlist.id, song.id, friend.id) == (True, None)
        assert await service.remove_song(playlist.id, song.id, friend.id) == (False, "Song not found in playlist")

    async def test_song_rules(self, service, make_song, shared):
        playlist, host, _, stranger = shared
        song = await make_song()

        assert await service.add_song(404, song.id, host.id) == (False, "Playlist not found")
        assert await service.add_song(playlist.id, song.id, stranger.id) == (
            False,
            "Only host or collaborators can add songs",
        )
        assert await service.add_song(playlist.id, 999, host.id) == (False, "Song not found")
        assert await service.remove_song(404, song.id, host.id) == (False, "Playlist not found")
        assert await service.remove_song(playlist.id, song.id, stranger.id) == (
            False,
            "Only host or collaborators can remove songs",
        )


class TestSessionPresence:
    async def test_active_users_carry_profile(self, service, clock, make_user, shared):
        playlist, host, friend, _ = shared

        await service.join_playlist_session(playlist.id, host.id)
        await service.join_playlist_session(playlist.id, friend.id)
        await service.join_playlist_session(playlist.id, 9999)
        await service.leave_playlist_session(playlist.id, friend.id)

        active = await service.get_active_users(playlist.id)

        assert [(u.user_id, u.username, u.last_active) for u in active] == [(host.id, "host", clock.now)]

    async def test_no_active_users(self, service):
        assert await service.get_active_users(1) == []

    async def test_cleanup_inactive_sessions(self, service, clock, shared):
        playlist, host, _, _ = shared
        await service.join_playlist_session(playlist.id, host.id)
        clock.advance(minutes=45)

        assert await service.cleanup_inactive_sessions() == 1
        assert await service.get_active_users(playlist.id) == []
