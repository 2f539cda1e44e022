"""Unit tests for the custom structlog processors."""

import pytest

from chatsurvey.core.logging import REDACTED, add_correlation_id, redact_secrets

pytestmark = pytest.mark.unit


def test_secrets_are_masked():
    event = redact_secrets(None, "info", {"event": "login_failed", "password": "pw", "email": "a@x.edu"})

    assert event == {"event": "login_failed", "password": REDACTED, "email": "a@x.edu"}


def test_no_correlation_id_outside_a_request():
    assert "correlation_id" not in add_correlation_id(None, "info", {"event": "startup_begin"})
