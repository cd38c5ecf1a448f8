"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database before anything imports it.
"""

import base64
import os
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["AUTH_JWT_SECRET"] = "foodops-test-jwt-secret"
os.environ["WEBHOOK_SECRET"] = "whsec_" + base64.b64encode(
    b"foodops-test-webhook-secret"
).decode()
os.environ["LOG_LEVEL"] = "WARNING"


@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from an empty schema"""
    from domain.models import Base, engine

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """
    Session on the test database for asserting on stored rows.

    Requests share the same in-memory connection, so anything written here
    must be committed before the next request.
    """
    from domain.models import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
