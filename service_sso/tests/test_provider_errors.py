"""
Unit tests for ProviderErrorTranslator.
"""

import json

import httpx
import pytest
from structlog.testing import capture_logs

from service_sso.app.keycloak.client import ProviderClientError
from service_sso.app.translation.provider_errors import ProviderErrorTranslator, find_client_error
from shared.errors import ExternalServiceError


def make_client_error(status_code: int, content: bytes) -> ProviderClientError:
    request = httpx.Request("PUT", "http://keycloak/admin/realms/sunbird/users/f%3Ap%3Au")
    return ProviderClientError(httpx.Response(status_code, content=content, request=request))


class TestFindClientError:
    """Test cases for locating the client error in a cause chain."""

    def test_direct(self):
        error = make_client_error(400, b"{}")
        assert find_client_error(error) is error

    def test_wrapped(self):
        """Test a client error raised as the cause of another exception."""
        error = make_client_error(409, b"{}")
        try:
            try:
                raise error
            except ProviderClientError as inner:
                raise RuntimeError("update failed") from inner
        except RuntimeError as outer:
            assert find_client_error(outer) is error

    def test_absent(self):
        assert find_client_error(ExternalServiceError("keycloak", "503")) is None


class TestProviderErrorTranslator:
    """Test cases for ProviderErrorTranslator."""

    @pytest.fixture
    def translator(self):
        return ProviderErrorTranslator()

    def test_oauth_error_body(self, translator):
        """Test error/error_description are parsed and logged as fields."""
        body = {"error": "invalid_grant", "error_description": "Account disabled"}
        error = make_client_error(400, json.dumps(body).encode())

        with capture_logs() as logs:
            parsed = translator.translate(error)

        assert parsed.error == "invalid_grant"
        assert parsed.error_description == "Account disabled"
        event = logs[-1]
        assert event["status_code"] == 400
        assert event["reason"] == "Bad Request"
        assert event["error"] == "invalid_grant"
        assert event["error_description"] == "Account disabled"

    def test_admin_error_message_body(self, translator):
        """Test Keycloak admin errorMessage bodies."""
        error = make_client_error(409, b'{"errorMessage": "User exists with same username"}')

        with capture_logs() as logs:
            parsed = translator.translate(error)

        assert parsed.error_message == "User exists with same username"
        assert logs[-1]["error_message"] == "User exists with same username"

    @pytest.mark.parametrize("content", [b"", b"<html>Bad Request</html>", b"[1, 2]", b"\xff\xfe"])
    def test_unparseable_body_is_logged_not_raised(self, translator, content):
        """Test translation never raises on odd bodies."""
        error = make_client_error(400, content)

        with capture_logs() as logs:
            assert translator.translate(error) is None

        assert logs[-1]["event"] == "Failed to parse provider error response"
        assert logs[-1]["status_code"] == 400

    def test_non_client_error(self, translator):
        """Test nothing is logged without a client error."""
        with capture_logs() as logs:
            assert translator.translate(ExternalServiceError("keycloak", "unreachable")) is None

        assert logs == []
