"""
Shared fixtures.

End-to-end tests run the real application against a temporary SQLite
database (aiosqlite). The application builds its own engine from the
test settings; the lifespan is not started, so the schema is created
here.
"""

from collections.abc import AsyncIterator
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from universe_api.core.config import Settings
from universe_api.core.database import Base
from universe_api.core.security import PasswordHasher, TokenService
from universe_api.main import create_app
from universe_api.modules.abiturient.models import AbiturientProfile  # noqa: F401
from universe_api.modules.users.models import User, UserRole
from universe_api.modules.users.repository import UserRepository

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
DEFAULT_PASSWORD = "secret123"


def years_ago(years: int, today: date | None = None) -> date:
    """Same calendar day ``years`` years back (Feb 29 falls back to Feb 28)."""
    today = today or date.today()
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        python_env="testing",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens(test_settings) -> TokenService:
    return TokenService(
        secret=test_settings.jwt_secret,
        algorithm=test_settings.jwt_algorithm,
        ttl=test_settings.access_token_ttl,
    )


@pytest.fixture
async def app(test_settings) -> AsyncIterator[FastAPI]:
    app = create_app(test_settings)
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield app

    await app.state.engine.dispose()


@pytest.fixture
def session_maker(app) -> async_sessionmaker[AsyncSession]:
    return app.state.session_maker


@pytest.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def create_user(session_maker, hasher):
    """Insert an account directly, bypassing the HTTP surface."""

    async def _create(
        email: str,
        role: UserRole = UserRole.ABITURIENT,
        *,
        password: str = DEFAULT_PASSWORD,
        phone: str = "+79990000000",
        is_active: bool = True,
    ) -> User:
        async with session_maker() as db:
            user = await UserRepository.create(
                db,
                email=email,
                phone=phone,
                password_hash=hasher.hash(password),
                role=role,
                is_active=is_active,
            )
            await db.commit()
            return user

    return _create


@pytest.fixture
def login(client):
    """Log in through the API and return the Authorization header."""

    async def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        response = await client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['data']['token']}"}

    return _login


@pytest.fixture
async def admin_headers(create_user, login) -> dict[str, str]:
    await create_user("admin@ugntu.ru", UserRole.ADMIN, phone="+79111111111")
    return await login("admin@ugntu.ru")


@pytest.fixture
def birth_date_for_age():
    """Birth date giving exactly ``age`` full years today."""
    return years_ago
