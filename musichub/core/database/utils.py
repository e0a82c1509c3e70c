"""
Database utility functions for engine and session management.

This module provides the core utility functions for creating database engines,
session factories, and repository bundles.

Functions:
- create_engine: Creates async SQLAlchemy engine with URL normalization
- create_sessionmaker: Creates async session factory with safe defaults
- create_all: Creates all tables from ORM metadata
- build_repositories: Builds the repository bundle for one session
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from . import entities  # noqa: F401  registers tables on the metadata
from .base import Base
from .repositories import (
    PlaylistRepository,
    ReactionRepository,
    SongRepository,
    UserRepository,
)


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    The helper normalizes Postgres URLs to ensure the async driver is used.
    For example, it rewrites ``postgresql://`` and other variants to
    ``postgresql+asyncpg://``. Other URLs (e.g. ``sqlite+aiosqlite://``)
    are passed through.

    Args:
        db_url: Database connection URL

    Returns:
        Configured AsyncEngine instance
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    if url.startswith("sqlite"):
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` with safe defaults for this project.

    Args:
        engine: Async SQLAlchemy engine

    Returns:
        Configured async session factory
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables for the current ORM metadata.

    Args:
        engine: Async SQLAlchemy engine
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@dataclass(frozen=True)
class RepositoryBundle:
    """Convenience bundle of all repositories sharing one session."""

    users: UserRepository
    playlists: PlaylistRepository
    songs: SongRepository
    reactions: ReactionRepository


def build_repositories(session: AsyncSession) -> RepositoryBundle:
    """Build a ``RepositoryBundle`` bound to ``session``.

    Args:
        session: Async session shared by every repository in the bundle

    Returns:
        Bundle containing all repository instances
    """
    return RepositoryBundle(
        users=UserRepository(session),
        playlists=PlaylistRepository(session),
        songs=SongRepository(session),
        reactions=ReactionRepository(session),
    )
