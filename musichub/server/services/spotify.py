"""Spotify Web API client

Overview
--------
Thin async HTTP client around the two Spotify surfaces the backend needs:

- The Web API (``/search``, ``/tracks/{id}``), authenticated with an app token
  obtained through the client-credentials grant and cached until it expires.
- The accounts service, used for the user-facing authorization code flow
  (login URL, code exchange, token refresh).

Errors
------
Transport and HTTP failures are raised internally as ``SpotifyApiError`` and
converted at the public method boundary into ``(success, value, error)``
tuples or ``SpotifyTokenResult`` objects, so callers never need to handle
HTTP exceptions.
"""

from __future__ import annotations

import asyncio
import secrets
import time
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote, urlencode

import httpx

from musichub.core.logging_config import get_logger
from musichub.core.models.io.spotify import SpotifyTokenResult, SpotifyTrackDetails
from musichub.server.core.config import SpotifyConfig

from .errors import SpotifyApiError

logger = get_logger(__name__)

CREDENTIALS_MISSING = "Spotify credentials not configured"
# refresh the app token slightly before Spotify expires it
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class SpotifyService:
    """Async client for the Spotify Web API and accounts service."""

    def __init__(self, config: SpotifyConfig, *, client: Optional[httpx.AsyncClient] = None) -> None:
        """Create a Spotify client.

        Args:
            config: Spotify configuration group (credentials, URLs, scopes).
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    @property
    def token_url(self) -> str:
        return f"{self.config.accounts_url.rstrip('/')}/api/token"

    def has_credentials(self) -> bool:
        return bool((self.config.client_id or "").strip() and (self.config.client_secret or "").strip())

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # App token (client credentials)
    # ------------------------------------------------------------------

    async def _get_access_token(self) -> str:
        if not self.has_credentials():
            raise SpotifyApiError(CREDENTIALS_MISSING)

        async with self._token_lock:
            if self._access_token and time.monotonic() < self._token_expires_at:
                return self._access_token

            payload = await self._post_token({"grant_type": "client_credentials"})
            token = payload.get("access_token")
            if not token:
                raise SpotifyApiError("Failed to get Spotify access token: response contained no token")
            expires_in = int(payload.get("expires_in") or 3600)
            self._access_token = token
            self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
            logger.debug(f"Obtained Spotify app token valid for {expires_in}s")
            return token

    async def _post_token(self, data: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = await self._client.post(
                self.token_url,
                data=data,
                auth=(self.config.client_id or "", self.config.client_secret or ""),
            )
        except httpx.HTTPError as e:
            raise SpotifyApiError(f"Failed to get Spotify access token: {e}") from e
        if response.status_code != 200:
            raise SpotifyApiError(
                f"Failed to get Spotify access token: {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )
        return response.json()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        token = await self._get_access_token()
        url = f"{self.config.api_url.rstrip('/')}{path}"
        try:
            response = await self._client.get(url, params=params, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            raise SpotifyApiError(f"Spotify request failed: {e}") from e
        if response.status_code != 200:
            raise SpotifyApiError(
                f"Spotify API returned {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )
        return response

    # ------------------------------------------------------------------
    # Web API
    # ------------------------------------------------------------------

    async def search_tracks(self, query: str, limit: int = 10) -> Tuple[bool, Optional[str], Optional[str]]:
        """Search Spotify tracks.

        Args:
            query: Free text search query.
            limit: Maximum number of tracks.

        Returns:
            ``(success, raw_json, error)``; the raw JSON is passed through untouched.
        """
        if not (query or "").strip():
            return False, None, "Search query is required"
        try:
            response = await self._get("/search", params={"q": query, "type": "track", "limit": limit})
        except SpotifyApiError as e:
            logger.warning(f"Spotify search for '{query}' failed: {e}")
            return False, None, str(e)
        return True, response.text, None

    async def get_track_details(self, spotify_id: str) -> Tuple[bool, Optional[SpotifyTrackDetails], Optional[str]]:
        """Fetch a single track.

        Args:
            spotify_id: Spotify track ID.

        Returns:
            ``(success, details, error)``
        """
        try:
            response = await self._get(f"/tracks/{quote(spotify_id, safe='')}")
        except SpotifyApiError as e:
            logger.warning(f"Fetching spotify track {spotify_id} failed: {e}")
            return False, None, str(e)
        try:
            details = SpotifyTrackDetails.model_validate(response.json())
        except ValueError as e:
            # covers both invalid JSON and pydantic ValidationError
            logger.warning(f"Unexpected payload for spotify track {spotify_id}: {e}")
            return False, None, "Invalid track data returned by Spotify"
        return True, details, None

    # ------------------------------------------------------------------
    # Authorization code flow
    # ------------------------------------------------------------------

    def generate_login_url(self, state: Optional[str] = None) -> str:
        """Build the Spotify authorize URL the frontend redirects users to."""
        params = {
            "response_type": "code",
            "client_id": self.config.client_id or "",
            "redirect_uri": self.config.redirect_uri,
            "scope": self.config.scopes,
            "state": state or secrets.token_urlsafe(16),
        }
        return f"{self.config.accounts_url.rstrip('/')}/authorize?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> SpotifyTokenResult:
        """Exchange an authorization code for user access and refresh tokens."""
        if not (code or "").strip():
            return SpotifyTokenResult(success=False, error="Authorization code is required")
        return await self._user_token_request(
            {"grant_type": "authorization_code", "code": code, "redirect_uri": self.config.redirect_uri}
        )

    async def refresh_access_token(self, refresh_token: str) -> SpotifyTokenResult:
        """Obtain a new user access token from a refresh token."""
        if not (refresh_token or "").strip():
            return SpotifyTokenResult(success=False, error="Refresh token is required")
        result = await self._user_token_request({"grant_type": "refresh_token", "refresh_token": refresh_token})
        if result.success and not result.refresh_token:
            # Spotify may omit the refresh token when it stays valid
            result.refresh_token = refresh_token
        return result

    async def _user_token_request(self, data: Dict[str, str]) -> SpotifyTokenResult:
        if not self.has_credentials():
            return SpotifyTokenResult(success=False, error=CREDENTIALS_MISSING)
        try:
            payload = await self._post_token(data)
        except SpotifyApiError as e:
            logger.warning(f"Spotify {data['grant_type']} request failed: {e}")
            return SpotifyTokenResult(success=False, error=str(e))
        if not payload.get("access_token"):
            return SpotifyTokenResult(success=False, error="Spotify returned no access token")
        return SpotifyTokenResult(
            success=True,
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_in=payload.get("expires_in"),
        )
