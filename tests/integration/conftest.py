"""
Integration test configuration
"""
import pytest
from fastapi.testclient import TestClient

from quickfix.api.deps import get_email_service, get_storage
from quickfix.app.main import app
from quickfix.core.security import create_access_token
from quickfix.db.base import get_db


@pytest.fixture
def client(db_session, fake_email, storage):
    """FastAPI test client with dependency overrides."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: fake_email
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for a given user."""
    def _headers(user):
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}
    return _headers
