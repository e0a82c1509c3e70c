"""
API endpoints for song reactions within a playlist.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, status

from musichub.core.models.io.base import MessageResponse
from musichub.core.models.io.reactions import SongReactionSummaryDto, ToggleReactionRequest
from musichub.server.services.deps import CurrentUserId, ReactionServiceDep

router = APIRouter(tags=["reactions"])


@router.post(
    "",
    response_model=MessageResponse,
    summary="Toggle Reaction",
    description=(
        "Like or dislike a song. Sending the same reaction again removes it; "
        "sending the opposite one switches it."
    ),
    responses={400: {"description": "Reaction could not be stored"}, 401: {"description": "Not authenticated"}},
)
async def toggle_reaction(
    playlist_id: int,
    song_id: int,
    body: ToggleReactionRequest,
    user_id: CurrentUserId,
    service: ReactionServiceDep,
) -> MessageResponse:
    """
    Toggle the caller's reaction.

    - **isLike**: true for like, false for dislike.
    """
    ok, error = await service.toggle_reaction(playlist_id, song_id, user_id, body.is_like)
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return MessageResponse(message="Reaction toggled successfully")


@router.get("", response_model=List[SongReactionSummaryDto], summary="List Reactions")
async def get_reactions(playlist_id: int, song_id: int, service: ReactionServiceDep) -> List[SongReactionSummaryDto]:
    return await service.get_reactions_for_song(playlist_id, song_id)
