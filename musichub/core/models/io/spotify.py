"""
Spotify I/O models.

``SpotifyTrackDetails`` mirrors the subset of the Spotify ``/tracks/{id}``
payload the backend consumes. The remaining models are request/response
bodies of the Spotify auth endpoints.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import ApiModel


class SpotifyArtist(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None


class SpotifyAlbum(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None


class SpotifyTrackDetails(BaseModel):
    """Track payload returned by the Spotify Web API."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    uri: Optional[str] = None
    name: str = ""
    artists: List[SpotifyArtist] = Field(default_factory=list)
    album: Optional[SpotifyAlbum] = None
    duration_ms: int = 0


class SpotifyTokenResult(BaseModel):
    """Outcome of an authorization code exchange or a token refresh."""

    success: bool
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    error: Optional[str] = None


class SpotifyCallbackRequest(ApiModel):
    code: Optional[str] = None


class SpotifyRefreshRequest(ApiModel):
    refresh_token: Optional[str] = None


class SpotifyLoginUrlResponse(ApiModel):
    url: str


class SpotifyTokensResponse(ApiModel):
    access_token: str
    refresh_token: Optional[str] = None
