"""Tests for correlation ID middleware and the error body contract.

Verifies:
- X-Request-ID header in responses
- Custom correlation ID echoing
- Debug ID in error responses without internal details
- Health and readiness endpoints
"""

import uuid

import pytest

pytestmark = pytest.mark.integration


def test_response_includes_correlation_id_header(client):
    """Every API response should include X-Request-ID header with valid UUID."""
    response = client.get("/api/health")

    assert "x-request-id" in response.headers
    correlation_id = response.headers["x-request-id"]
    try:
        uuid.UUID(correlation_id)
    except ValueError:
        raise AssertionError(f"X-Request-ID header value '{correlation_id}' is not a valid UUID")


def test_custom_correlation_id_echoed(client):
    """Client-provided X-Request-ID should be echoed back in response."""
    response = client.get("/api/health", headers={"X-Request-ID": "custom-id-123"})

    assert response.headers["x-request-id"] == "custom-id-123"


def test_different_requests_get_different_ids(client):
    first = client.get("/api/health").headers["x-request-id"]
    second = client.get("/api/health").headers["x-request-id"]

    assert first != second


def test_error_response_includes_debug_id(client):
    """Error bodies are flat: an error message plus a debug id."""
    response = client.get("/api/admin/sessions")

    assert response.status_code == 401
    body = response.json()
    assert set(body) == {"error", "debug_id"}
    uuid.UUID(body["debug_id"])


def test_server_error_hides_internal_details(failing_client, start_session):
    session_id = start_session()

    response = failing_client.post("/api/workshop/message", json={"session_id": session_id, "message": "Hi"})

    assert response.status_code == 500
    assert response.json()["error"] == "Text generation failed"
    assert "Anthropic" not in response.text


def test_unknown_route_is_404_with_error_body(client):
    response = client.get("/api/no-such-survey/info")

    assert response.status_code == 404
    assert "debug_id" in response.json()


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "chatsurvey"}


def test_ready_reports_missing_data_dir(client):
    response = client.get("/api/ready")

    assert response.status_code == 503
    assert response.json()["checks"] == {"data_dir": False, "session_registry": True}


def test_ready_when_data_dir_exists(client, settings):
    settings.sessions_dir.mkdir(parents=True)

    response = client.get("/api/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"
