"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
mounts uploaded profile images and includes all API routers. It serves as the
root of the web server.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from musichub.core.database import init_db
from musichub.core.logging_config import get_logger, setup_logging

from .api.v1 import (
    auth,
    collaborative_playlists,
    health,
    playlists,
    reactions,
    songs,
    spotify,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .services.deps import close_spotify_service, get_session_tracker

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def _cleanup_sessions_periodically(interval_seconds: int) -> None:
    """Drop inactive collaborative session entries every ``interval_seconds``."""
    tracker = get_session_tracker()
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await tracker.cleanup()
            if removed:
                logger.info(f"Removed {removed} inactive playlist session entries")
        except Exception as e:
            logger.error(f"Playlist session cleanup failed: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup creates the database schema and starts the session cleanup task.
    Shutdown cancels the task and closes the shared Spotify HTTP client.
    """
    # Startup
    try:
        logger.info("Starting up MusicHub Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    cleanup_task = asyncio.create_task(
        _cleanup_sessions_periodically(settings.collaboration.cleanup_interval_seconds)
    )

    yield

    # Shutdown
    logger.info("Shutting down MusicHub Server...")
    cleanup_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await cleanup_task
    await close_spotify_service()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    MusicHub Server API

    Backend for the MusicHub playlist platform. Users register and log in, build playlists
    from Spotify tracks, invite collaborators, edit playlists together and react to songs.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)

setup_exception_handlers(app)

profiles_dir = Path(settings.uploads.web_root) / "profiles"
profiles_dir.mkdir(parents=True, exist_ok=True)
app.mount("/profiles", StaticFiles(directory=str(profiles_dir)), name="profiles")

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_PREFIX}/auth")
app.include_router(users.router, prefix=f"{constant.API_PREFIX}/users")
app.include_router(playlists.router, prefix=f"{constant.API_PREFIX}/playlists")
app.include_router(songs.router, prefix=f"{constant.API_PREFIX}/songs")
app.include_router(
    collaborative_playlists.router, prefix=f"{constant.API_PREFIX}/collaborative-playlists"
)
app.include_router(
    reactions.router, prefix=f"{constant.API_PREFIX}/playlists/{{playlist_id}}/songs/{{song_id}}/reactions"
)
app.include_router(spotify.router, prefix=f"{constant.API_PREFIX}/spotify")
app.include_router(spotify.auth_router, prefix=f"{constant.API_PREFIX}/spotify-auth")
