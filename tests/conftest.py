"""
Pytest configuration and shared fixtures.

The environment is prepared before anything imports ``app.config``: tests
always run against an in-memory SQLite database and a fixed pepper.
"""

import os
import sys
from pathlib import Path

# Add project root to sys.path so we can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["PEPPER"] = "test-pepper"
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from domain.models import (  # noqa: E402
    create_db_engine,
    create_session_factory,
    init_database,
    dispose_engine,
)
from services.password import PasswordHasher  # noqa: E402

TEST_PEPPER = "test-pepper"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(TEST_PEPPER)


@pytest.fixture
def db_session():
    """
    Session on a fresh in-memory database with all tables created.
    """
    engine = create_db_engine("sqlite+pysqlite:///:memory:")
    init_database(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        dispose_engine(engine)


@pytest.fixture
def client():
    """
    TestClient on a freshly built application.

    Entering the client runs the lifespan, so every test gets its own empty
    database.
    """
    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
