"""
API endpoints for collaborative playlist editing.

Hosts invite and remove collaborators; the host and collaborators add and
remove songs. Clients call ``join``/``leave`` while a playlist is open so the
``active-users`` endpoint can show who is currently editing.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, status

from musichub.core.models.io.base import MessageResponse
from musichub.core.models.io.collaboration import (
    AccessResponse,
    ActiveUserDto,
    AddCollaboratorRequest,
    CollaborativeSongRequest,
)
from musichub.core.models.io.users import UserDto
from musichub.server.services.deps import CollaborativeServiceDep, CurrentUserId

router = APIRouter(tags=["collaborative-playlists"])


def _bad_request(error: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)


@router.get(
    "/{playlist_id}/collaborators",
    response_model=List[UserDto],
    summary="List Collaborators",
    responses={401: {"description": "Missing or invalid token"}, 404: {"description": "Playlist not found"}},
)
async def get_collaborators(
    playlist_id: int, _: CurrentUserId, service: CollaborativeServiceDep
) -> List[UserDto]:
    collaborators = await service.get_collaborators(playlist_id)
    if collaborators is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Playlist not found")
    return collaborators


@router.post(
    "/{playlist_id}/collaborators",
    response_model=MessageResponse,
    summary="Add Collaborator",
    description="Invite a user by username. Host only.",
    responses={400: {"description": "Invalid request or rule violation"}, 401: {"description": "Not authenticated"}},
)
async def add_collaborator(
    playlist_id: int, body: AddCollaboratorRequest, user_id: CurrentUserId, service: CollaborativeServiceDep
) -> MessageResponse:
    """
    Add a collaborator to a playlist.

    - **username**: Username of the user to invite.
    """
    if not (body.username or "").strip():
        raise _bad_request("Username is required")
    ok, error = await service.add_collaborator_by_username(playlist_id, body.username, user_id)
    if not ok:
        raise _bad_request(error)
    return MessageResponse(message="Collaborator added successfully")


@router.delete(
    "/{playlist_id}/collaborators/{collaborator_id}",
    response_model=MessageResponse,
    summary="Remove Collaborator",
    description="Remove a collaborator from a playlist. Host only.",
    responses={400: {"description": "Rule violation"}, 401: {"description": "Not authenticated"}},
)
async def remove_collaborator(
    playlist_id: int, collaborator_id: int, user_id: CurrentUserId, service: CollaborativeServiceDep
) -> MessageResponse:
    ok, error = await service.remove_collaborator(playlist_id, collaborator_id, user_id)
    if not ok:
        raise _bad_request(error)
    return MessageResponse(message="Collaborator removed successfully")


@router.post(
    "/{playlist_id}/songs",
    response_model=MessageResponse,
    summary="Add Song",
    description="Add an existing song to a playlist. Host or collaborators only.",
    responses={400: {"description": "Invalid song ID or rule violation"}, 401: {"description": "Not authenticated"}},
)
async def add_song(
    playlist_id: int, body: CollaborativeSongRequest, user_id: CurrentUserId, service: CollaborativeServiceDep
) -> MessageResponse:
    if body.song_id <= 0:
        raise _bad_request("Invalid song ID")
    ok, error = await service.add_song(playlist_id, body.song_id, user_id)
    if not ok:
        raise _bad_request(error)
    return MessageResponse(message="Song added successfully")


@router.delete(
    "/{playlist_id}/songs/{song_id}",
    response_model=MessageResponse,
    summary="Remove Song",
    description="Remove a song from a playlist. Host or collaborators only.",
    responses={400: {"description": "Rule violation"}, 401: {"description": "Not authenticated"}},
)
async def remove_song(
    playlist_id: int, song_id: int, user_id: CurrentUserId, service: CollaborativeServiceDep
) -> MessageResponse:
    ok, error = await service.remove_song(playlist_id, song_id, user_id)
    if not ok:
        raise _bad_request(error)
    return MessageResponse(message="Song removed successfully")


@router.get(
    "/{playlist_id}/access",
    response_model=AccessResponse,
    summary="Check Access",
    description="Whether the authenticated user is the host or a collaborator of the playlist.",
)
async def check_access(playlist_id: int, user_id: CurrentUserId, service: CollaborativeServiceDep) -> AccessResponse:
    return AccessResponse(has_access=await service.can_access_playlist(playlist_id, user_id))


@router.post("/{playlist_id}/join", response_model=MessageResponse, summary="Join Playlist Session")
async def join_session(playlist_id: int, user_id: CurrentUserId, service: CollaborativeServiceDep) -> MessageResponse:
    """
    Mark the authenticated user as present in the playlist.

    Calling it again refreshes the presence timestamp, so clients can use it as a heartbeat.
    """
    await service.join_playlist_session(playlist_id, user_id)
    return MessageResponse(message="Joined playlist session")


@router.post("/{playlist_id}/leave", response_model=MessageResponse, summary="Leave Playlist Session")
async def leave_session(playlist_id: int, user_id: CurrentUserId, service: CollaborativeServiceDep) -> MessageResponse:
    await service.leave_playlist_session(playlist_id, user_id)
    return MessageResponse(message="Left playlist session")


@router.get(
    "/{playlist_id}/active-users",
    response_model=List[ActiveUserDto],
    summary="Active Users",
    description="Users currently present in the playlist session.",
)
async def get_active_users(playlist_id: int, service: CollaborativeServiceDep) -> List[ActiveUserDto]:
    return await service.get_active_users(playlist_id)
