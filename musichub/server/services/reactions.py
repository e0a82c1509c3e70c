"""
Reaction service.

Likes and dislikes on playlist songs. Reacting twice with the same value
removes the reaction; reacting with the opposite value flips it.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from musichub.core.database.base import utc_now_naive
from musichub.core.database.entities.reactions import PlaylistSongReaction
from musichub.core.database.repositories.reactions import ReactionRepository
from musichub.core.database.repositories.users import UserRepository
from musichub.core.logging_config import get_logger
from musichub.core.models.io.reactions import SongReactionSummaryDto

logger = get_logger(__name__)


class ReactionService:
    def __init__(self, reactions: ReactionRepository, users: UserRepository) -> None:
        self.reactions = reactions
        self.users = users

    async def toggle_reaction(
        self, playlist_id: int, song_id: int, user_id: int, is_like: bool
    ) -> Tuple[bool, Optional[str]]:
        """
        Create, flip or remove the user's reaction on a playlist song.

        Returns:
            ``(success, error)``
        """
        try:
            existing = await self.reactions.get(playlist_id, song_id, user_id)
            if existing is None:
                await self.reactions.add(
                    PlaylistSongReaction(
                        playlist_id=playlist_id,
                        song_id=song_id,
                        user_id=user_id,
                        is_like=is_like,
                        created_at=utc_now_naive(),
                    )
                )
            elif existing.is_like == is_like:
                await self.reactions.remove(existing)
            else:
                existing.is_like = is_like
                await self.reactions.update(existing)
            return True, None
        except Exception as e:
            logger.error(f"Toggling reaction on song {song_id} in playlist {playlist_id} failed: {e}", exc_info=True)
            return False, f"Failed to toggle reaction: {e}"

    async def get_reactions_for_song(self, playlist_id: int, song_id: int) -> List[SongReactionSummaryDto]:
        """Reactions on a playlist song with the reacting users' public info."""
        reactions = await self.reactions.get_for_song(playlist_id, song_id)
        if not reactions:
            return []
        users = {user.id: user for user in await self.users.get_by_ids([r.user_id for r in reactions])}
        return [
            SongReactionSummaryDto(
                user_id=reaction.user_id,
                username=users[reaction.user_id].username,
                profile_image=users[reaction.user_id].profile_image,
                is_like=reaction.is_like,
                created_at=reaction.created_at,
            )
            for reaction in reactions
            if reaction.user_id in users
        ]
