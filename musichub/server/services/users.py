"""
User service.

Account administration (listing, role changes, deletion), the username
search used when inviting collaborators, and profile image uploads.
"""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from musichub.core.database.entities.users import UserRole
from musichub.core.database.repositories.users import UserRepository
from musichub.core.logging_config import get_logger
from musichub.core.models.io.users import UserDto, UserSearchResult
from musichub.core.utils import GenericConverter
from musichub.server.core.config import UploadConfig

logger = get_logger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 10

_to_dto = GenericConverter().convert_all


class UserService:
    """Business logic around user accounts."""

    def __init__(self, users: UserRepository, uploads: Optional[UploadConfig] = None) -> None:
        self.users = users
        self.uploads = uploads or UploadConfig()

    async def get_all(self) -> List[UserDto]:
        return _to_dto(await self.users.get_all(), UserDto.model_validate)

    async def get_by_id(self, user_id: int) -> Optional[UserDto]:
        user = await self.users.get_by_id(user_id)
        return UserDto.model_validate(user) if user else None

    async def delete(self, user_id: int) -> Tuple[bool, Optional[str]]:
        if not await self.users.delete(user_id):
            return False, "User not found"
        logger.info(f"Deleted user {user_id}")
        return True, None

    async def change_role(self, user_id: int, role: UserRole) -> Tuple[bool, Optional[str]]:
        user = await self.users.get_by_id(user_id)
        if user is None:
            return False, "User not found"
        user.role = role
        await self.users.update(user)
        logger.info(f"Changed role of user {user_id} to {role.value}")
        return True, None

    async def search_users(self, query: Optional[str]) -> List[UserSearchResult]:
        """Search users by username. Queries shorter than two characters return nothing."""
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        users = await self.users.search_by_username(query, SEARCH_LIMIT)
        return _to_dto(users, UserSearchResult.model_validate)

    async def update_profile_image(
        self, user_id: int, filename: str, content: bytes, web_root: Optional[str] = None
    ) -> Optional[UserDto]:
        """
        Store an uploaded profile image and point the user at it.

        The file is written to ``<web_root>/profiles/<uuid><ext>`` and served
        publicly as ``/profiles/<uuid><ext>``.

        Args:
            user_id: Owner of the image
            filename: Original client file name, used for its extension
            content: Raw file bytes
            web_root: Directory served as static content; defaults to the configured one

        Returns:
            Updated user, or None if the user does not exist

        Raises:
            ValueError: Invalid extension, oversized file or failed update
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            return None

        extension = Path(filename or "").suffix.lower()
        if extension not in _normalize(self.uploads.allowed_image_extensions):
            raise ValueError("Invalid file type.")
        if len(content) > self.uploads.max_profile_image_bytes:
            raise ValueError("File too large.")

        profiles_dir = Path(web_root or self.uploads.web_root) / "profiles"
        file_name = f"{uuid.uuid4().hex}{extension}"
        await asyncio.to_thread(_write_file, profiles_dir / file_name, content)

        public_path = f"/profiles/{file_name}"
        if not await self.users.update_profile_image(user_id, public_path):
            await asyncio.to_thread((profiles_dir / file_name).unlink, missing_ok=True)
            raise ValueError("Failed to update profile image.")

        logger.info(f"Updated profile image of user {user_id} to {public_path}")
        user = await self.users.get_by_id(user_id)
        return UserDto.model_validate(user)


def _normalize(extensions: Sequence[str]) -> List[str]:
    return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions]


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
