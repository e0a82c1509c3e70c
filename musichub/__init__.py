"""MusicHub.

Backend for a collaborative music-playlist application. Users register and log
in, build playlists out of Spotify tracks, invite collaborators, edit playlists
together in live sessions, and react to songs.

High-level architecture
-----------------------

The codebase follows a classic layered layout:

- ``musichub.server.api``: FastAPI routers. They translate HTTP requests into
  service calls and service results into status codes.
- ``musichub.server.services``: business rules (authentication, host and
  collaborator permissions, Spotify lookups, reaction toggling, live session
  tracking).
- ``musichub.core.database``: SQLModel entities and async repositories.
- ``musichub.core.models.io``: request/response schemas.

Typical workflow
----------------

1. Register or log in to obtain a bearer token.
2. Create a playlist (the caller becomes its host).
3. Search Spotify and add tracks to the playlist.
4. Invite collaborators, who can then add and remove songs as well.
5. Join the playlist session to show up in the active users list.
"""
