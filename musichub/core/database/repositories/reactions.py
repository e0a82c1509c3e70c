"""
Reaction repository.

Data access for likes and dislikes on playlist songs.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.reactions import PlaylistSongReaction
from .base import AsyncBaseRepository


class ReactionRepository(AsyncBaseRepository[PlaylistSongReaction]):
    """Repository for playlist song reactions using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PlaylistSongReaction)

    async def get(self, playlist_id: int, song_id: int, user_id: int) -> Optional[PlaylistSongReaction]:
        """Get the reaction a user left on a song within a playlist.

        Args:
            playlist_id: Playlist ID
            song_id: Song ID
            user_id: User ID

        Returns:
            PlaylistSongReaction or None
        """
        stmt = select(PlaylistSongReaction).where(
            PlaylistSongReaction.playlist_id == playlist_id,
            PlaylistSongReaction.song_id == song_id,
            PlaylistSongReaction.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_for_song(self, playlist_id: int, song_id: int) -> List[PlaylistSongReaction]:
        stmt = (
            select(PlaylistSongReaction)
            .where(
                PlaylistSongReaction.playlist_id == playlist_id,
                PlaylistSongReaction.song_id == song_id,
            )
            .order_by(col(PlaylistSongReaction.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def remove(self, reaction: PlaylistSongReaction) -> None:
        await self.session.delete(reaction)
        await self.session.commit()
