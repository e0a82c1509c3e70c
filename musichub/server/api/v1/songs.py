"""
API endpoints for songs.

Songs enter the catalogue when a Spotify track is added to a playlist; these
endpoints list, read and delete them.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, status

from musichub.core.models.io.base import MessageResponse
from musichub.core.models.io.songs import AddSongToPlaylistRequest, SongAddedResponse, SongDto
from musichub.server.services.deps import CurrentUserId, SongServiceDep

router = APIRouter(tags=["songs"])


@router.get("", response_model=List[SongDto], summary="List Songs")
async def list_songs(service: SongServiceDep) -> List[SongDto]:
    return await service.get_all()


@router.get(
    "/{song_id}",
    response_model=SongDto,
    summary="Get Song",
    responses={404: {"description": "Song not found"}},
)
async def get_song(song_id: int, service: SongServiceDep) -> SongDto:
    song = await service.get_by_id(song_id)
    if song is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Song with ID {song_id} not found.")
    return song


@router.post(
    "/add-to-playlist",
    response_model=SongAddedResponse,
    summary="Add Spotify Track To Playlist",
    description="Resolve a Spotify track, store it with its artists and append it to a playlist.",
    responses={
        400: {"description": "Missing Spotify ID or Spotify lookup failed"},
        401: {"description": "Missing or invalid token"},
        404: {"description": "Playlist not found"},
        409: {"description": "Song already in the playlist"},
    },
)
async def add_song_to_playlist(
    body: AddSongToPlaylistRequest, user_id: CurrentUserId, service: SongServiceDep
) -> SongAddedResponse:
    """
    Add a Spotify track to a playlist.

    - **playlistId**: Target playlist.
    - **spotifyId**: Spotify track ID.
    """
    ok, error, song_id = await service.add_song_to_playlist(body, user_id)
    if not ok:
        if "not found" in error:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error)
        if "already in" in error:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return SongAddedResponse(message="Song added successfully", song_id=song_id)


@router.delete(
    "/{song_id}",
    response_model=MessageResponse,
    summary="Delete Song",
    description="Delete a song and remove it from every playlist.",
    responses={404: {"description": "Song not found"}},
)
async def delete_song(song_id: int, service: SongServiceDep) -> MessageResponse:
    ok, error = await service.delete(song_id)
    if not ok:
        if "not found" in error:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return MessageResponse(message="Song deleted successfully")
