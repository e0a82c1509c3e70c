"""Fixtures for server tests: Spotify stub transport and the HTTP test client."""

from __future__ import annotations

import json
from typing import AsyncGenerator, Callable, Dict
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from musichub.core.database.entities import User
from musichub.server.core.config import JWTConfig, SpotifyConfig
from musichub.server.services.spotify import SpotifyService
from musichub.server.services.token import TokenService

SPOTIFY_TRACKS: Dict[str, dict] = {
    "track-1": {
        "id": "track-1",
        "uri": "spotify:track:track-1",
        "name": "Get Lucky",
        "duration_ms": 369_626,
        "album": {"name": "Random Access Memories"},
        "artists": [{"name": "Daft Punk"}, {"name": "Pharrell Williams"}],
    },
    "track-2": {
        "id": "track-2",
        "uri": "spotify:track:track-2",
        "name": "Instant Crush",
        "duration_ms": 337_000,
        "album": {"name": "Random Access Memories"},
        "artists": [{"name": "Daft Punk"}, {"name": "Julian Casablancas"}],
    },
    "no-uri": {"id": "no-uri", "uri": None, "name": "Broken", "duration_ms": 1000, "artists": []},
}


def spotify_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for the Spotify accounts service and Web API."""
    path = request.url.path
    if request.url.host == "mock-accounts" and path == "/api/token":
        form = dict(httpx.QueryParams(request.content.decode()))
        grant = form.get("grant_type")
        if grant == "client_credentials":
            return httpx.Response(200, json={"access_token": "app-token", "expires_in": 3600})
        if grant == "authorization_code" and form.get("code") == "good-code":
            return httpx.Response(
                200, json={"access_token": "user-token", "refresh_token": "user-refresh", "expires_in": 3600}
            )
        if grant == "refresh_token" and form.get("refresh_token") == "user-refresh":
            return httpx.Response(200, json={"access_token": "user-token-2", "expires_in": 3600})
        return httpx.Response(400, json={"error": "invalid_grant"})

    if request.headers.get("Authorization") != "Bearer app-token":
        return httpx.Response(401, json={"error": "invalid token"})
    if path == "/v1/search":
        query = request.url.params.get("q")
        return httpx.Response(200, text=json.dumps({"tracks": {"items": [], "query": query}}))
    if path.startswith("/v1/tracks/"):
        track = SPOTIFY_TRACKS.get(path.rsplit("/", 1)[-1])
        if track is None:
            return httpx.Response(404, json={"error": {"status": 404, "message": "non existing id"}})
        return httpx.Response(200, json=track)
    return httpx.Response(404)


@pytest.fixture
def spotify_config() -> SpotifyConfig:
    return SpotifyConfig(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:5173/callback",
        accounts_url="http://mock-accounts",
        api_url="http://mock-api/v1",
    )


@pytest_asyncio.fixture
async def spotify_service(spotify_config) -> AsyncGenerator[SpotifyService, None]:
    service = SpotifyService(
        spotify_config, client=httpx.AsyncClient(transport=httpx.MockTransport(spotify_handler))
    )
    yield service
    await service.aclose()


@pytest.fixture
def token_service() -> TokenService:
    from musichub.server.services.deps import get_token_service

    return get_token_service()


@pytest.fixture
def auth_headers(token_service) -> Callable[[User], Dict[str, str]]:
    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_service.generate(user)}"}

    return _headers


@pytest.fixture
def session_tracker():
    from datetime import timedelta

    from musichub.server.services.collaboration import PlaylistSessionTracker

    return PlaylistSessionTracker(timedelta(minutes=30))


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, spotify_service: SpotifyService, session_tracker
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from musichub.core.database import get_session
    from musichub.server.main import app
    from musichub.server.services.deps import get_session_tracker, get_spotify_service

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_spotify_service] = lambda: spotify_service
    app.dependency_overrides[get_session_tracker] = lambda: session_tracker

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("musichub.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def jwt_config() -> JWTConfig:
    return JWTConfig(key="unit-test-key-that-is-long-enough-for-hs256", expire_days=7)
