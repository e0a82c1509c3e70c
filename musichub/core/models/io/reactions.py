"""
Reaction I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .base import ApiModel


class ToggleReactionRequest(ApiModel):
    is_like: bool


class SongReactionSummaryDto(ApiModel):
    """Reaction decorated with the reacting user's public info."""

    user_id: int
    username: str
    profile_image: Optional[str] = None
    is_like: bool
    created_at: datetime
