from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from civicpulse.core.config import Settings
from civicpulse.core.security import PasswordHasher
from civicpulse.db.session import Database
from civicpulse.main import create_app
from civicpulse.models.user import User
from civicpulse.schemas.auth import RegisterRequest
from civicpulse.services.categories import seed_categories
from civicpulse.services.users import register_user

TEST_PASSWORD = "correct-horse-battery"
ADMIN_EMAIL = "admin@civicpulse.io"
ADMIN_PASSWORD = "admin-password"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'civicpulse.db'}",
        secret_key="test-secret-key",
        bcrypt_rounds=4,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
async def database(settings):
    database = Database(settings.database_url)
    await database.create_all()
    async with database.session() as session:
        await seed_categories(session)
        await session.commit()
    yield database
    await database.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
async def citizen(session, hasher) -> User:
    user = await register_user(
        session,
        RegisterRequest(name="Asha", email="asha@civicpulse.io", password=TEST_PASSWORD),
        hasher,
    )
    return user


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def bearer() -> Callable[[str], dict[str, str]]:
    return lambda token: {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client) -> Callable[..., dict]:
    """Register through the API and return the response body."""

    def _signup(name: str = "Asha", email: str = "asha@civicpulse.io", password: str = TEST_PASSWORD) -> dict:
        response = client.post("/api/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture
def admin_token(client) -> str:
    response = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["token"]
