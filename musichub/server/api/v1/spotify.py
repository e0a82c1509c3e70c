"""
API endpoints backed by Spotify.

- ``/spotify/search/{query}`` proxies a track search using the app token.
- ``/spotify-auth/*`` drives the user authorization code flow.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response, status

from musichub.core.models.io.spotify import (
    SpotifyCallbackRequest,
    SpotifyLoginUrlResponse,
    SpotifyRefreshRequest,
    SpotifyTokensResponse,
)
from musichub.server.services.deps import SpotifyServiceDep

router = APIRouter(tags=["spotify"])
auth_router = APIRouter(tags=["spotify-auth"])


@router.get(
    "/search/{query}",
    summary="Search Tracks",
    description="Search Spotify tracks. The Spotify JSON payload is returned as is.",
    responses={500: {"description": "Spotify search failed"}},
)
async def search(query: str, spotify: SpotifyServiceDep) -> Response:
    ok, content, error = await spotify.search_tracks(query)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error or "Spotify search failed"
        )
    return Response(content=content, media_type="application/json")


@auth_router.get("/login-url", response_model=SpotifyLoginUrlResponse, summary="Spotify Login URL")
async def login_url(spotify: SpotifyServiceDep) -> SpotifyLoginUrlResponse:
    return SpotifyLoginUrlResponse(url=spotify.generate_login_url())


@auth_router.post(
    "/callback",
    response_model=SpotifyTokensResponse,
    summary="Exchange Authorization Code",
    responses={400: {"description": "Code exchange failed"}},
)
async def callback(body: SpotifyCallbackRequest, spotify: SpotifyServiceDep) -> SpotifyTokensResponse:
    """
    Exchange the ``code`` Spotify redirected back with for user tokens.

    - **code**: Authorization code from the Spotify redirect.
    """
    result = await spotify.exchange_code_for_token(body.code or "")
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return SpotifyTokensResponse(access_token=result.access_token, refresh_token=result.refresh_token)


@auth_router.post(
    "/refresh",
    response_model=SpotifyTokensResponse,
    response_model_exclude_none=True,
    summary="Refresh Spotify Token",
    responses={400: {"description": "Missing refresh token"}, 401: {"description": "Refresh failed"}},
)
async def refresh(body: SpotifyRefreshRequest, spotify: SpotifyServiceDep) -> SpotifyTokensResponse:
    if not (body.refresh_token or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Refresh token is required")
    result = await spotify.refresh_access_token(body.refresh_token)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.error)
    return SpotifyTokensResponse(access_token=result.access_token)
