"""Error types raised by service integrations.

Purpose:
- Provide typed exceptions for failures talking to the Spotify Web API.
- Expose HTTP-oriented context (status code, error body) for diagnosis.

Service methods catch these and turn them into result objects; they are not
meant to reach the HTTP layer.
"""

from __future__ import annotations

from typing import Any, Optional


class SpotifyApiError(Exception):
    """Base error for Spotify API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload from the server (e.g., JSON or text body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details
