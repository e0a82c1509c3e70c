"""
User repository.

Data access for user accounts: lookups by id and username, existence checks,
bulk lookups used when decorating reactions and active users, and the
username search behind the collaborator picker.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.playlists import Playlist, PlaylistCollaborator, PlaylistSong
from ..entities.reactions import PlaylistSongReaction
from ..entities.users import User
from .base import AsyncBaseRepository


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by exact username.

        Args:
            username: Login name

        Returns:
            User instance or None
        """
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def exists_by_username(self, username: str) -> bool:
        """Check whether a username is already taken (case-insensitive)."""
        stmt = select(func.count()).select_from(User).where(func.lower(User.username) == username.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def get_by_ids(self, user_ids: Iterable[int]) -> List[User]:
        """Get all users whose id is in ``user_ids``. Unknown ids are ignored."""
        ids = list(set(user_ids))
        if not ids:
            return []
        stmt = select(User).where(col(User.id).in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_all(self) -> List[User]:
        stmt = select(User).order_by(User.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_profile_image(self, user_id: int, image_path: str) -> bool:
        """Store a new profile image path for the user.

        Args:
            user_id: User ID
            image_path: Public path of the saved image (e.g. ``/profiles/<name>.png``)

        Returns:
            True if the user exists and was updated, False otherwise
        """
        user = await self.get_by_id(user_id)
        if user is None:
            return False
        user.profile_image = image_path
        await self.update(user)
        return True

    async def search_by_username(self, query: str, limit: int = 10) -> List[User]:
        """Case-insensitive "contains" search on usernames.

        Args:
            query: Text to look for; blank queries return nothing
            limit: Maximum number of users returned

        Returns:
            Matching users ordered by username
        """
        if not query or not query.strip():
            return []
        text = query.strip().lower()
        for char in ("\\", "%", "_"):
            text = text.replace(char, f"\\{char}")
        pattern = f"%{text}%"
        stmt = (
            select(User)
            .where(func.lower(User.username).like(pattern, escape="\\"))
            .order_by(User.username)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, entity_id: int) -> bool:
        """Delete a user together with the playlists they host and their links.

        Args:
            entity_id: User ID

        Returns:
            True if deleted, False if not found
        """
        user = await self.get_by_id(entity_id)
        if user is None:
            return False

        hosted = select(Playlist.id).where(Playlist.host_id == entity_id)
        statements = [
            sa_delete(PlaylistSongReaction).where(
                or_(
                    PlaylistSongReaction.user_id == entity_id,
                    col(PlaylistSongReaction.playlist_id).in_(hosted),
                )
            ),
            sa_delete(PlaylistCollaborator).where(
                or_(
                    PlaylistCollaborator.user_id == entity_id,
                    col(PlaylistCollaborator.playlist_id).in_(hosted),
                )
            ),
            sa_delete(PlaylistSong).where(col(PlaylistSong.playlist_id).in_(hosted)),
            sa_update(PlaylistSong)
            .where(PlaylistSong.added_by_user_id == entity_id)
            .values(added_by_user_id=None),
            sa_delete(Playlist).where(Playlist.host_id == entity_id),
        ]
        for stmt in statements:
            await self.session.execute(stmt.execution_options(synchronize_session=False))

        await self.session.delete(user)
        await self.session.commit()
        return True
