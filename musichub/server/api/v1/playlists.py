"""
API endpoints for managing playlists.

Provides operations for listing the caller's playlists, reading a playlist
with its songs and collaborators, creating playlists, editing them (full
replacement or partial patch), deleting them and removing songs.

Only the host of a playlist may modify or delete it.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from musichub.core.models.io.base import MessageResponse
from musichub.core.models.io.playlists import PlaylistCreate, PlaylistPatch, PlaylistRead, PlaylistUpdate
from musichub.server.services.deps import CurrentUserId, PlaylistServiceDep

router = APIRouter(tags=["playlists"])


def _raise_for(error: str) -> None:
    """Map a playlist service error message to an HTTP error."""
    if "not found" in error:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error)
    if error.startswith("Only hosts"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)


@router.get(
    "",
    response_model=List[PlaylistRead],
    summary="List My Playlists",
    description="List playlists the authenticated user hosts or collaborates on.",
    responses={401: {"description": "Missing or invalid token"}},
)
async def list_playlists(user_id: CurrentUserId, service: PlaylistServiceDep) -> List[PlaylistRead]:
    return await service.get_all(user_id)


@router.get(
    "/{playlist_id}",
    response_model=PlaylistRead,
    summary="Get Playlist",
    description="Retrieve a playlist with its host, collaborators and songs.",
    responses={404: {"description": "Playlist not found"}},
)
async def get_playlist(playlist_id: int, service: PlaylistServiceDep) -> PlaylistRead:
    """
    Get playlist by ID.

    - **playlist_id**: The unique identifier of the playlist.
    """
    playlist = await service.get_by_id(playlist_id)
    if playlist is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Playlist with ID {playlist_id} not found.")
    return playlist


@router.post(
    "",
    response_model=PlaylistRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Playlist",
    description="Create a playlist hosted by the authenticated user.",
    responses={
        201: {"description": "Playlist created"},
        400: {"description": "Invalid playlist data"},
        401: {"description": "Missing or invalid token"},
    },
)
async def create_playlist(body: PlaylistCreate, user_id: CurrentUserId, service: PlaylistServiceDep) -> PlaylistRead:
    """
    Create a new playlist.

    - **name**: Playlist name (required).
    - **description**: Optional description.
    - **coverImage**: Optional cover image URL.
    """
    ok, error, playlist = await service.create(body, user_id)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return playlist


@router.put(
    "/by-id/{playlist_id}",
    response_model=PlaylistRead,
    summary="Replace Playlist",
    description="Replace the editable fields of a playlist. Host only.",
    responses={
        403: {"description": "Caller is not the host"},
        404: {"description": "Playlist not found"},
    },
)
async def update_playlist(
    playlist_id: int, body: PlaylistUpdate, user_id: CurrentUserId, service: PlaylistServiceDep
) -> PlaylistRead:
    ok, error, playlist = await service.update(playlist_id, body, user_id)
    if not ok:
        _raise_for(error)
    return playlist


@router.patch(
    "/{playlist_id}",
    response_model=PlaylistRead,
    summary="Edit Playlist",
    description="Change only the provided fields of a playlist. Host only.",
    responses={
        403: {"description": "Caller is not the host"},
        404: {"description": "Playlist not found"},
    },
)
async def edit_playlist(
    playlist_id: int, body: PlaylistPatch, user_id: CurrentUserId, service: PlaylistServiceDep
) -> PlaylistRead:
    ok, error, playlist = await service.edit(playlist_id, body, user_id)
    if not ok:
        _raise_for(error)
    return playlist


@router.delete(
    "/{playlist_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Playlist",
    description="Delete a playlist together with its songs entries, collaborators and reactions. Host only.",
    responses={
        403: {"description": "Caller is not the host"},
        404: {"description": "Playlist not found"},
    },
)
async def delete_playlist(playlist_id: int, user_id: CurrentUserId, service: PlaylistServiceDep) -> Response:
    ok, error = await service.delete(playlist_id, user_id)
    if not ok:
        _raise_for(error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{playlist_id}/songs/{song_id}",
    response_model=MessageResponse,
    summary="Remove Song From Playlist",
    description="Remove a song from a playlist. Host or collaborators only.",
    responses={
        400: {"description": "Caller may not edit this playlist"},
        404: {"description": "Playlist or song entry not found"},
    },
)
async def remove_song_from_playlist(
    playlist_id: int, song_id: int, user_id: CurrentUserId, service: PlaylistServiceDep
) -> MessageResponse:
    ok, error = await service.remove_song_from_playlist(playlist_id, song_id, user_id)
    if not ok:
        if "not found" in error:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return MessageResponse(message="Song removed from playlist successfully")
