"""API-specific test fixtures.

The app's lifespan is not run: every dependency that would read ``app.state``
is overridden, and the data directory lives under tmp_path.
"""

import pytest
from fastapi.testclient import TestClient

from chatsurvey.api.deps import get_llm_client, get_session_registry
from chatsurvey.core.config import get_settings
from chatsurvey.main import app as application


@pytest.fixture
def app(settings, fake_llm, registry):
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_llm_client] = lambda: fake_llm
    application.dependency_overrides[get_session_registry] = lambda: registry
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def failing_client(app, fake_llm_failing):
    """Client whose LLM calls all fail."""
    app.dependency_overrides[get_llm_client] = lambda: fake_llm_failing
    return TestClient(app)


@pytest.fixture
def admin_headers(settings):
    return {"Authorization": f"Bearer {settings.admin_password}"}


@pytest.fixture
def start_session(client):
    """Factory: start a session through the API and return its id."""

    def _start(survey_type: str = "workshop", name: str = "Ada", email: str = "ada@example.edu", **extra) -> str:
        response = client.post(f"/api/{survey_type}/start", json={"name": name, "email": email, **extra})
        assert response.status_code == 200, response.text
        return response.json()["session_id"]

    return _start
