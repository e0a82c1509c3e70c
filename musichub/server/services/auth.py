"""
Authentication service.

Handles account registration and login. Passwords are stored as bcrypt
hashes; successful calls return a signed bearer token with the user's public
profile.
"""

from __future__ import annotations

from typing import Optional, Tuple

import bcrypt

from musichub.core.database.entities.users import User, UserRole
from musichub.core.database.repositories.users import UserRepository
from musichub.core.logging_config import get_logger
from musichub.core.models.io.auth import LoginResponse
from musichub.core.models.io.users import UserDto

from .token import TokenService

logger = get_logger(__name__)

AuthResult = Tuple[bool, Optional[str], Optional[LoginResponse]]

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash stored for this account
        logger.warning("Stored password hash could not be parsed")
        return False


class AuthService:
    """Register accounts and log users in."""

    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self.users = users
        self.tokens = tokens

    def _issue(self, user: User) -> LoginResponse:
        return LoginResponse(token=self.tokens.generate(user), user=UserDto.model_validate(user))

    async def login(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Validate credentials and issue a token.

        Args:
            username: Login name; surrounding whitespace is ignored
            password: Plain text password

        Returns:
            ``(success, error, response)``
        """
        username = (username or "").strip()
        if not username or not password:
            return False, "Username and password are required", None

        user = await self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for '{username}'")
            return False, "Invalid credentials", None

        logger.info(f"User {user.id} logged in")
        return True, None, self._issue(user)

    async def register(
        self, username: Optional[str], password: Optional[str], confirm_password: Optional[str]
    ) -> AuthResult:
        """
        Create a new account and issue a token.

        New accounts get the Host role so they can create playlists right away.

        Args:
            username: Desired login name; surrounding whitespace is ignored
            password: Plain text password
            confirm_password: Must equal ``password``

        Returns:
            ``(success, error, response)``
        """
        username = (username or "").strip()
        if not username or not password:
            return False, "Username and password are required", None
        if password != confirm_password:
            return False, "Passwords do not match", None
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False, "Password is too long", None
        if await self.users.exists_by_username(username):
            return False, "Username already exists", None

        user = User(username=username, password_hash=hash_password(password), role=UserRole.HOST)
        user = await self.users.add(user)
        logger.info(f"Registered user {user.id} ({username})")
        return True, None, self._issue(user)
