"""
Tests for the shared error taxonomy, configuration and logging helpers.
"""

import pytest

from shared.config import SSOSettings, get_settings
from shared.errors import (
    AccessLayerException,
    ConfigurationError,
    ExternalServiceError,
    InvalidUserDataError,
    UnauthorizedError,
)
from shared.logging import (
    add_correlation_context,
    add_service_context,
    clear_context,
    set_request_id,
    set_user_context,
)


class TestErrors:
    """Test cases for the error taxonomy."""

    @pytest.mark.parametrize("error, code, status_code", [
        (UnauthorizedError(), "UNAUTHORIZED", 401),
        (ConfigurationError(), "SSO_CONFIGURATION_ERROR", 500),
        (InvalidUserDataError(), "INVALID_USER_DATA", 400),
        (ExternalServiceError("keycloak", "503 Service Unavailable"), "EXTERNAL_SERVICE_ERROR", 502),
    ])
    def test_codes(self, error, code, status_code):
        assert isinstance(error, AccessLayerException)
        assert error.code == code
        assert error.status_code == status_code

    def test_to_response(self):
        """Test error response rendering."""
        error = InvalidUserDataError(details={"user_id": "user-42"})

        response = error.to_response()

        assert response.code == "INVALID_USER_DATA"
        assert response.message == "Given user data is invalid."
        assert response.details == {"user_id": "user-42"}

    def test_external_service_message(self):
        error = ExternalServiceError("keycloak", "unreachable")
        assert str(error) == "keycloak: unreachable"


class TestSettings:
    """Test cases for configuration loading."""

    def test_defaults(self, monkeypatch):
        for name in ("SSO_URL", "SSO_REALM", "SSO_PUBLIC_KEY", "SSO_FEDERATION_PROVIDER_ID"):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()

        assert settings.sso_realm == "sunbird"
        assert settings.sso_public_key is None
        assert settings.sso_admin_realm == "master"

    def test_environment_is_read_per_call(self, monkeypatch):
        """Test settings are not cached."""
        monkeypatch.setenv("SSO_REALM", "first")
        assert get_settings().sso_realm == "first"

        monkeypatch.setenv("SSO_REALM", "second")
        assert get_settings().sso_realm == "second"

    def test_types(self, monkeypatch):
        monkeypatch.setenv("SSO_TIMEOUT", "2.5")
        assert SSOSettings().sso_timeout == 2.5


class TestLoggingContext:
    """Test cases for structlog processors."""

    def teardown_method(self):
        clear_context()

    def test_correlation_context(self):
        request_id = set_request_id()
        set_user_context(user_id="user-42")

        event = add_correlation_context(None, "info", {"event": "Token verified"})

        assert event["request_id"] == request_id
        assert event["user_id"] == "user-42"

    @pytest.mark.parametrize("user_id", [None, ""])
    def test_blank_user_replaces_previous(self, user_id):
        set_user_context(user_id="user-42")
        set_user_context(user_id=user_id)

        event = add_correlation_context(None, "info", {"event": "x"})

        assert "user_id" not in event

    def test_cleared_context(self):
        set_request_id("req-1")
        clear_context()

        event = add_correlation_context(None, "info", {"event": "x"})

        assert "request_id" not in event
        assert "user_id" not in event

    def test_service_context(self):
        event = add_service_context(None, "info", {"logger": "sso.verifier"})
        assert event["service"] == "sso"
