"""
Shared fixtures.

Every test gets its own SQLite database file under tmp_path, either wrapped
in a full application (``client``) or as a bare storage client (``db``).
"""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.database.connection import Database
from app.main import create_app
from config.appconfig import AppSettings

PASSWORD = "s3cure-passw0rd"


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def app_settings(tmp_path):
    return AppSettings(DATABASE_URL=sqlite_url(tmp_path), ENVIRONMENT="test")


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(sqlite_url(tmp_path))
    await database.connect()
    yield database
    await database.disconnect()


@pytest_asyncio.fixture
async def db(database):
    async for session in database.session():
        yield session


def signup(client, email, role="doctor", password=PASSWORD):
    response = client.post("/api/auth/signup", json={"email": email, "password": password, "role": role})
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login(client, email, password=PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def logged_in(client):
    """Client holding a doctor's session cookie."""
    signup(client, "doctor@clinic.com", role="doctor")
    login(client, "doctor@clinic.com")
    return client


def patient_payload(**overrides):
    payload = {
        "firstName": "Ana",
        "lastName": "Lopez",
        "phone": "555-0001",
        "gender": "female",
    }
    payload.update(overrides)
    return payload
