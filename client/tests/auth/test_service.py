"""Tests for AuthService against the fake backend."""

import pytest

from learnhub.auth.permissions import UserRole
from learnhub.auth.schemas import LoginRequest, RegisterRequest
from learnhub.core.context import get_user_id
from learnhub.core.errors import ApiValidationError, AuthorizationError
from learnhub.main import LearnHub
from tests.fake_backend import FakeBackend


class TestLogin:
    """Tests for login."""

    @pytest.mark.asyncio
    async def test_login_stores_session(self, hub: LearnHub) -> None:
        user = await hub.auth.login(LoginRequest(username="alice", password="password123"))

        assert user.username == "alice"
        assert user.role == UserRole.STUDENT
        assert hub.auth.is_authenticated is True
        assert hub.session.refresh_token is not None
        assert get_user_id() == str(user.id)

    @pytest.mark.asyncio
    async def test_bad_credentials(self, hub: LearnHub) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            await hub.auth.login(LoginRequest(username="alice", password="wrong-password"))

        assert exc_info.value.message == "Invalid credentials"
        assert hub.auth.is_authenticated is False


class TestRegister:
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_register_logs_in(self, hub: LearnHub) -> None:
        request = RegisterRequest(
            username="dave",
            email="dave@example.com",
            first_name="Dave",
            last_name="Jones",
            role=UserRole.INSTRUCTOR,
            password="password123",
            password2="password123",
        )
        user = await hub.auth.register(request)

        assert user.username == "dave"
        assert user.is_instructor
        assert hub.auth.current_user == user

    @pytest.mark.asyncio
    async def test_duplicate_username_message_is_verbatim(self, hub: LearnHub) -> None:
        request = RegisterRequest(
            username="alice",
            email="alice2@example.com",
            role=UserRole.STUDENT,
            password="password123",
            password2="password123",
        )
        with pytest.raises(ApiValidationError) as exc_info:
            await hub.auth.register(request)

        assert exc_info.value.message == (
            "username: A user with that username already exists."
        )


class TestLogout:
    """Tests for logout."""

    @pytest.mark.asyncio
    async def test_logout_clears_session(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        await alice.logout()

        assert alice.auth.is_authenticated is False
        assert backend.count("POST", "/api/logout/") == 1
        assert get_user_id() is None

    @pytest.mark.asyncio
    async def test_logout_clears_session_when_backend_fails(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        backend.fail("POST", "/api/logout/", status=500)

        await alice.logout()

        assert alice.auth.is_authenticated is False
