"""
User entity models.

Users own (host) playlists, collaborate on other users' playlists and react
to songs. The role drives authorization on administrative endpoints.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base


class UserRole(str, Enum):
    """Role assigned to a user account."""

    GUEST = "Guest"
    USER = "User"
    HOST = "Host"
    ADMIN = "Admin"


class UserBase(Base):
    """Base fields for user."""

    username: str = Field(index=True, unique=True, max_length=100, description="Unique login name")
    role: UserRole = Field(default=UserRole.USER, description="Authorization role")
    profile_image: Optional[str] = Field(default=None, description="Public path of the uploaded profile image")


class User(UserBase, table=True):
    """Registered user account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str = Field(description="bcrypt hash of the password")

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role={self.role})"
