"""
Unit tests for the authentication service layer.

These tests cover:
- Registration (hashing, duplicate email)
- Login (unknown email, inactive account, wrong password, success)
- Token refresh
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from universe_api.core.exceptions import (
    AccountInactiveError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
)
from universe_api.core.security import PasswordHasher, TokenService
from universe_api.modules.auth.schemas import LoginRequest, RegisterRequest
from universe_api.modules.auth.service import login, refresh, register
from universe_api.modules.users.models import User, UserRole

SERVICE = "universe_api.modules.auth.service.UserRepository"


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(secret="auth-service-test-secret-long-enough", ttl=timedelta(hours=2))


@pytest.fixture
def registration():
    return RegisterRequest(
        email="a@x.com",
        phone="+79990000000",
        password="pw123456",
        confirmPassword="pw123456",
    )


@pytest.fixture
def stored_user(hasher):
    return User(
        id=1,
        email="a@x.com",
        phone="+79990000000",
        password_hash=hasher.hash("pw123456"),
        role=UserRole.ABITURIENT,
        is_active=True,
    )


class TestRegister:
    """Tests for register function."""

    @pytest.mark.asyncio
    async def test_register_success(self, mock_db, hasher, tokens, registration, stored_user):
        with patch(SERVICE) as mock_repo:
            mock_repo.email_exists = AsyncMock(return_value=False)
            mock_repo.create = AsyncMock(return_value=stored_user)
            mock_repo.get_by_id = AsyncMock(return_value=stored_user)

            result = await register(mock_db, registration, hasher=hasher, tokens=tokens)

            assert result.user is stored_user
            assert result.expires_in == 7200
            assert tokens.verify(result.token).id == stored_user.id
            mock_db.commit.assert_awaited_once()

            kwargs = mock_repo.create.call_args.kwargs
            assert kwargs["role"] == UserRole.ABITURIENT
            assert kwargs["password_hash"] != "pw123456"
            assert hasher.verify("pw123456", kwargs["password_hash"])
            assert kwargs["last_login"] is not None

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, mock_db, hasher, tokens, registration):
        with patch(SERVICE) as mock_repo:
            mock_repo.email_exists = AsyncMock(return_value=True)
            mock_repo.create = AsyncMock()

            with pytest.raises(EmailAlreadyExistsError) as exc_info:
                await register(mock_db, registration, hasher=hasher, tokens=tokens)

            assert exc_info.value.status_code == 409
            mock_repo.create.assert_not_called()
            mock_db.commit.assert_not_called()


class TestLogin:
    """Tests for login function."""

    @pytest.mark.asyncio
    async def test_login_success(self, mock_db, hasher, tokens, stored_user):
        with patch(SERVICE) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=stored_user)
            mock_repo.touch_last_login = AsyncMock()
            mock_repo.get_by_id = AsyncMock(return_value=stored_user)

            result = await login(
                mock_db,
                LoginRequest(email="a@x.com", password="pw123456"),
                hasher=hasher,
                tokens=tokens,
            )

            assert tokens.verify(result.token).email == "a@x.com"
            mock_repo.touch_last_login.assert_awaited_once_with(mock_db, stored_user)
            mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, mock_db, hasher, tokens):
        with patch(SERVICE) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await login(
                    mock_db,
                    LoginRequest(email="nobody@x.com", password="pw123456"),
                    hasher=hasher,
                    tokens=tokens,
                )
            assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, mock_db, hasher, tokens, stored_user):
        with patch(SERVICE) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=stored_user)
            mock_repo.touch_last_login = AsyncMock()

            with pytest.raises(InvalidCredentialsError):
                await login(
                    mock_db,
                    LoginRequest(email="a@x.com", password="wrong-password"),
                    hasher=hasher,
                    tokens=tokens,
                )
            mock_repo.touch_last_login.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_inactive_checked_before_password(
        self, mock_db, hasher, tokens, stored_user
    ):
        """A deactivated account is reported even when the password is wrong."""
        stored_user.is_active = False
        with patch(SERVICE) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=stored_user)

            with pytest.raises(AccountInactiveError) as exc_info:
                await login(
                    mock_db,
                    LoginRequest(email="a@x.com", password="wrong-password"),
                    hasher=hasher,
                    tokens=tokens,
                )
            assert exc_info.value.status_code == 403


class TestRefresh:
    def test_refresh_issues_new_token(self, tokens, stored_user):
        stored_user.last_login = datetime.now(UTC)
        first = refresh(stored_user, tokens=tokens)
        second = refresh(stored_user, tokens=tokens)

        assert first.token != second.token
        assert tokens.verify(first.token) == tokens.verify(second.token)
