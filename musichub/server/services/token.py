"""
Access token issuance and validation.

Tokens are HS256 JWTs carrying the user id, username and role, plus issuer and
audience claims taken from the JWT configuration group.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from musichub.core.database.entities.users import User, UserRole
from musichub.server.core.config import JWTConfig


@dataclass(frozen=True)
class TokenClaims:
    """Identity extracted from a validated access token."""

    user_id: int
    username: str
    role: UserRole


class TokenService:
    """Generate and decode signed access tokens."""

    def __init__(self, config: JWTConfig) -> None:
        self.config = config

    def generate(self, user: User) -> str:
        """Create a signed token for ``user`` valid for ``expire_days`` days."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user.id),
            "nameid": str(user.id),
            "name": user.username,
            "role": UserRole(user.role).value,
            "iss": self.config.issuer,
            "aud": self.config.audience,
            "iat": now,
            "exp": now + timedelta(days=self.config.expire_days),
        }
        return jwt.encode(payload, self.config.key, algorithm=self.config.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Validate signature, expiry, issuer and audience and return the payload.

        Raises:
            jwt.InvalidTokenError: If the token is malformed, expired or signed for another audience.
        """
        return jwt.decode(
            token,
            self.config.key,
            algorithms=[self.config.algorithm],
            audience=self.config.audience,
            issuer=self.config.issuer,
        )

    def read_claims(self, token: str) -> TokenClaims:
        """Decode ``token`` into ``TokenClaims``.

        Raises:
            jwt.InvalidTokenError: If the token is invalid or lacks identity claims.
        """
        payload = self.decode(token)
        try:
            return TokenClaims(
                user_id=int(payload.get("nameid") or payload["sub"]),
                username=payload.get("name", ""),
                role=UserRole(payload.get("role", UserRole.USER.value)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise jwt.InvalidTokenError(f"Token is missing identity claims: {e}") from e
