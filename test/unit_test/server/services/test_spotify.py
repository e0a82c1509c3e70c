"""Unit tests for the Spotify client service using a stub HTTP transport."""

from __future__ import annotations

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from musichub.server.core.config import SpotifyConfig
from musichub.server.services.spotify import SpotifyService


class TestAppToken:
    async def test_token_is_cached(self, spotify_config):
        token_calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/token":
                token_calls.append(request)
                return httpx.Response(200, json={"access_token": "app-token", "expires_in": 3600})
            return httpx.Response(200, json={"tracks": {"items": []}})

        service = SpotifyService(spotify_config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        try:
            await service.search_tracks("daft punk")
            await service.search_tracks("justice")
        finally:
            await service.aclose()

        assert len(token_calls) == 1
        assert token_calls[0].headers["Authorization"].startswith("Basic ")

    async def test_token_failure_is_reported(self, spotify_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        service = SpotifyService(spotify_config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        try:
            ok, content, error = await service.search_tracks("daft punk")
        finally:
            await service.aclose()

        assert not ok and content is None
        assert error.startswith("Failed to get Spotify access token")

    async def test_missing_credentials(self):
        service = SpotifyService(
            SpotifyConfig(accounts_url="http://mock-accounts", api_url="http://mock-api/v1"),
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))),
        )
        try:
            ok, _, error = await service.search_tracks("x")
            result = await service.exchange_code_for_token("code")
        finally:
            await service.aclose()

        assert (ok, error) == (False, "Spotify credentials not configured")
        assert (result.success, result.error) == (False, "Spotify credentials not configured")


class TestSearchAndTracks:
    async def test_search_returns_raw_json(self, spotify_service):
        ok, content, error = await spotify_service.search_tracks("get lucky")

        assert ok and error is None
        assert json.loads(content)["tracks"]["query"] == "get lucky"

    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_search_requires_query(self, spotify_service, query):
        assert await spotify_service.search_tracks(query) == (False, None, "Search query is required")

    async def test_track_details(self, spotify_service):
        ok, details, error = await spotify_service.get_track_details("track-1")

        assert ok and error is None
        assert details.name == "Get Lucky"
        assert details.album.name == "Random Access Memories"
        assert [a.name for a in details.artists] == ["Daft Punk", "Pharrell Williams"]

    async def test_unknown_track(self, spotify_service):
        ok, details, error = await spotify_service.get_track_details("missing")

        assert not ok and details is None
        assert "404" in error

    async def test_track_id_is_kept_inside_the_path(self, spotify_config):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/token":
                return httpx.Response(200, json={"access_token": "app-token", "expires_in": 3600})
            paths.append(request.url.raw_path)
            return httpx.Response(404, json={"error": "not found"})

        service = SpotifyService(spotify_config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        try:
            ok, _, _ = await service.get_track_details("../me?market=US")
        finally:
            await service.aclose()

        assert not ok
        assert paths == [b"/v1/tracks/..%2Fme%3Fmarket%3DUS"]

    @pytest.mark.parametrize(
        "payload",
        [
            pytest.param(httpx.Response(200, text="not json"), id="invalid-json"),
            pytest.param(httpx.Response(200, json={"artists": "nope"}), id="invalid-shape"),
        ],
    )
    async def test_malformed_track_payload(self, spotify_config, payload):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/token":
                return httpx.Response(200, json={"access_token": "app-token", "expires_in": 3600})
            return payload

        service = SpotifyService(spotify_config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        try:
            result = await service.get_track_details("track-1")
        finally:
            await service.aclose()

        assert result == (False, None, "Invalid track data returned by Spotify")


class TestAuthorizationCodeFlow:
    def test_login_url(self, spotify_service, spotify_config):
        url = urlparse(spotify_service.generate_login_url(state="xyz"))
        params = parse_qs(url.query)

        assert f"{url.scheme}://{url.netloc}{url.path}" == "http://mock-accounts/authorize"
        assert params["response_type"] == ["code"]
        assert params["client_id"] == ["client-id"]
        assert params["redirect_uri"] == [spotify_config.redirect_uri]
        assert params["scope"] == [spotify_config.scopes]
        assert params["state"] == ["xyz"]

    def test_login_url_generates_state(self, spotify_service):
        first = parse_qs(urlparse(spotify_service.generate_login_url()).query)["state"]
        second = parse_qs(urlparse(spotify_service.generate_login_url()).query)["state"]

        assert first != second

    async def test_exchange_code(self, spotify_service):
        result = await spotify_service.exchange_code_for_token("good-code")

        assert result.success
        assert (result.access_token, result.refresh_token) == ("user-token", "user-refresh")

    async def test_exchange_bad_code(self, spotify_service):
        result = await spotify_service.exchange_code_for_token("bad-code")

        assert not result.success
        assert result.error.startswith("Failed to get Spotify access token")

    async def test_exchange_requires_code(self, spotify_service):
        result = await spotify_service.exchange_code_for_token(" ")

        assert (result.success, result.error) == (False, "Authorization code is required")

    async def test_refresh_keeps_refresh_token(self, spotify_service):
        result = await spotify_service.refresh_access_token("user-refresh")

        assert result.success
        assert (result.access_token, result.refresh_token) == ("user-token-2", "user-refresh")

    async def test_refresh_requires_token(self, spotify_service):
        result = await spotify_service.refresh_access_token("")

        assert (result.success, result.error) == (False, "Refresh token is required")
