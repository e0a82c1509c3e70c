"""
Database layer for MusicHub.

Structure:
- entities/: Database entity models organized by table/business logic
- repositories/: Data access layer organized by table/business logic
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session, repo bundle)
"""

from .base import Base
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    RepositoryBundle,
    build_repositories,
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "RepositoryBundle",
    "async_session_maker",
    "build_repositories",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
]
