"""Unit tests for registration, login and token handling."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from musichub.core.database.entities import User, UserRole
from musichub.server.services.auth import AuthService, hash_password, verify_password
from musichub.server.services.token import TokenService


@pytest.fixture
def tokens(jwt_config) -> TokenService:
    return TokenService(jwt_config)


@pytest.fixture
def auth(repos, tokens) -> AuthService:
    return AuthService(repos.users, tokens)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("s3cret", "not-a-bcrypt-hash") is False


class TestRegister:
    async def test_register_creates_host_and_returns_token(self, auth, tokens, repos):
        ok, error, response = await auth.register("  newbie  ", "pw", "pw")

        assert ok and error is None
        assert response.user.username == "newbie"
        assert response.user.role == UserRole.HOST
        stored = await repos.users.get_by_username("newbie")
        assert stored.password_hash != "pw"
        assert tokens.read_claims(response.token).user_id == stored.id

    @pytest.mark.parametrize(
        "username, password, confirm, expected",
        [
            ("", "pw", "pw", "Username and password are required"),
            ("   ", "pw", "pw", "Username and password are required"),
            ("user", "", "", "Username and password are required"),
            (None, None, None, "Username and password are required"),
            ("user", "pw", "other", "Passwords do not match"),
            ("user", "pw", None, "Passwords do not match"),
        ],
    )
    async def test_register_validation(self, auth, username, password, confirm, expected):
        ok, error, response = await auth.register(username, password, confirm)

        assert not ok
        assert error == expected
        assert response is None

    async def test_register_duplicate_username_ignores_case(self, auth, make_user):
        await make_user("Taken")

        ok, error, _ = await auth.register("taken", "pw", "pw")

        assert not ok
        assert error == "Username already exists"

    async def test_register_rejects_password_over_72_bytes(self, auth, repos):
        ok, error, response = await auth.register("longpw", "x" * 100, "x" * 100)

        assert (ok, error, response) == (False, "Password is too long", None)
        assert await repos.users.get_by_username("longpw") is None

    async def test_register_counts_password_bytes_not_characters(self, auth):
        ok, error, _ = await auth.register("accent", "é" * 37, "é" * 37)
        assert (ok, error) == (False, "Password is too long")

        ok, error, _ = await auth.register("boundary", "x" * 72, "x" * 72)
        assert ok and error is None


class TestLogin:
    async def test_login_success(self, auth, make_user):
        user = await make_user("alice", password="wonderland")

        ok, error, response = await auth.login(" alice ", "wonderland")

        assert ok and error is None
        assert response.user.id == user.id

    @pytest.mark.parametrize("username, password", [("", "pw"), ("alice", ""), (None, None)])
    async def test_login_requires_credentials(self, auth, username, password):
        ok, error, _ = await auth.login(username, password)

        assert not ok
        assert error == "Username and password are required"

    async def test_login_rejects_wrong_password_and_unknown_user(self, auth, make_user):
        await make_user("alice", password="wonderland")

        assert await auth.login("alice", "nope") == (False, "Invalid credentials", None)
        assert await auth.login("bob", "wonderland") == (False, "Invalid credentials", None)

    async def test_login_with_overlong_password_is_invalid_credentials(self, auth, make_user):
        await make_user("alice", password="wonderland")

        assert await auth.login("alice", "x" * 100) == (False, "Invalid credentials", None)


class TestTokenService:
    def test_claims_round_trip(self, tokens):
        user = User(id=7, username="dj", role=UserRole.ADMIN, password_hash="x")

        claims = tokens.read_claims(tokens.generate(user))

        assert (claims.user_id, claims.username, claims.role) == (7, "dj", UserRole.ADMIN)

    def test_payload_carries_issuer_audience_and_expiry(self, tokens, jwt_config):
        user = User(id=1, username="dj", role=UserRole.USER, password_hash="x")

        payload = tokens.decode(tokens.generate(user))

        assert payload["iss"] == jwt_config.issuer
        assert payload["aud"] == jwt_config.audience
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert timedelta(days=6) < expires - datetime.now(timezone.utc) <= timedelta(days=7)

    def test_rejects_token_for_other_audience(self, tokens, jwt_config):
        other = TokenService(jwt_config.model_copy(update={"audience": "someone-else"}))
        token = other.generate(User(id=1, username="dj", role=UserRole.USER, password_hash="x"))

        with pytest.raises(jwt.InvalidTokenError):
            tokens.read_claims(token)

    def test_rejects_expired_token(self, tokens, jwt_config):
        payload = {
            "sub": "1",
            "name": "dj",
            "role": "User",
            "iss": jwt_config.issuer,
            "aud": jwt_config.audience,
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        }
        token = jwt.encode(payload, jwt_config.key, algorithm="HS256")

        with pytest.raises(jwt.ExpiredSignatureError):
            tokens.read_claims(token)

    def test_rejects_token_without_identity(self, tokens, jwt_config):
        payload = {"iss": jwt_config.issuer, "aud": jwt_config.audience}
        token = jwt.encode(payload, jwt_config.key, algorithm="HS256")

        with pytest.raises(jwt.InvalidTokenError):
            tokens.read_claims(token)
