"""
Common test fixtures.

Every test gets its own SQLite file under pytest's tmp_path and bcrypt runs
at its minimum work factor to keep the suite fast.
"""
import logging

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from daylog.core.config import Settings
from daylog.db.database import Database
from daylog.db.migrations import SchemaManager
from daylog.db.repositories.account_repository import AccountRepository
from daylog.db.repositories.journal_repository import JournalRepository
from daylog.main import create_app
from daylog.services.auth_service import AuthenticationService

TEST_BCRYPT_ROUNDS = 4


@pytest.fixture(autouse=True)
def setup_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)
    yield


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "daylog.sqlite")


@pytest_asyncio.fixture
async def database(db_path):
    """Fully migrated database"""
    db = Database(db_path)
    await db.initialize()
    await SchemaManager(db).prepare()
    return db


@pytest_asyncio.fixture
async def schema_state(database):
    return await SchemaManager(database).resolve()


@pytest.fixture
def journal(database, schema_state):
    return JournalRepository(database, schema_state)


@pytest.fixture
def accounts(database):
    return AccountRepository(database)


@pytest.fixture
def auth_service(accounts):
    return AuthenticationService(accounts, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def settings(db_path):
    return Settings(
        _env_file=None,
        DATABASE_PATH=db_path,
        BCRYPT_ROUNDS=TEST_BCRYPT_ROUNDS,
        ADMIN_USER="admin",
        ADMIN_PASS="admin-pass",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def client(settings):
    """HTTP client with the app's lifespan running"""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Factory registering a user and returning auth headers"""
    def _register(username: str = "alice", password: str = "secret") -> dict:
        response = client.post(
            "/api/register", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['session_token']}"}
    return _register
