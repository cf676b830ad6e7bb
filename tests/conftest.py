"""Test configuration and fixtures."""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from sitegate.config import (
    AuthSettings,
    BootstrapSettings,
    DatabaseSettings,
    MonitoringSettings,
    Settings,
)
from sitegate.core.auth import AuthService
from sitegate.core.sessions import SessionManager
from sitegate.database import Database
from sitegate.main import create_app
from sitegate.services.directory import SqlUserDirectory

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpassword123"
USER_EMAIL = "test@example.com"
USER_PASSWORD = "testpassword123"


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
        auth=AuthSettings(secret_key="test-secret-key"),
        bootstrap=BootstrapSettings(
            admin_email=ADMIN_EMAIL,
            admin_password=ADMIN_PASSWORD,
            on_startup=True,
        ),
        monitoring=MonitoringSettings(level="WARNING", format="console"),
    )


@pytest.fixture
def session_manager(test_settings):
    return SessionManager(test_settings.auth)


@pytest_asyncio.fixture
async def database(test_settings):
    """Database with tables created."""
    database = Database(test_settings.database)
    await database.init_db()

    yield database

    await database.close()


@pytest_asyncio.fixture
async def async_session(database):
    """Create async session for tests."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def directory(async_session):
    return SqlUserDirectory(async_session)


@pytest.fixture
def auth_service(directory, session_manager):
    return AuthService(directory, session_manager)


@pytest.fixture
def client(test_settings):
    """Test client; the admin account is created at startup."""
    app = create_app(test_settings)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_user(client):
    """Register a regular user through the API."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": USER_EMAIL, "password": USER_PASSWORD, "name": "Test User"},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def user_client(client, test_user):
    """Client carrying a regular user's session cookie."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": USER_EMAIL, "password": USER_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def admin_client(client):
    """Client carrying an elevated session cookie."""
    response = client.post(
        "/api/v1/auth/admin-login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client
