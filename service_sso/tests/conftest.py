"""
Shared fixtures for SSO service tests.
"""

import pytest
from fastapi.testclient import TestClient

from mocks.keycloak.server import MockKeycloakServer
from service_sso.app.keycloak.client import KeycloakAdminClient
from shared.test_helpers import TEST_PROVIDER_ID, TEST_REALM, TEST_SSO_URL, generate_key_pair


@pytest.fixture(scope="session")
def key_pair():
    """RSA key pair shared by the whole session; generation is slow."""
    return generate_key_pair()


@pytest.fixture(scope="session")
def other_key_pair():
    """A second key pair, for tokens signed by someone else."""
    return generate_key_pair()


@pytest.fixture
def sso_env(monkeypatch, key_pair):
    """Point configuration at the test realm."""
    monkeypatch.setenv("SSO_URL", TEST_SSO_URL)
    monkeypatch.setenv("SSO_REALM", TEST_REALM)
    monkeypatch.setenv("SSO_PUBLIC_KEY", key_pair.public_key_b64)
    monkeypatch.setenv("SSO_FEDERATION_PROVIDER_ID", TEST_PROVIDER_ID)
    monkeypatch.setenv("SSO_ADMIN_REALM", "master")
    monkeypatch.setenv("SSO_CLIENT_ID", "admin-cli")
    monkeypatch.setenv("SSO_USERNAME", "admin")
    monkeypatch.setenv("SSO_PASSWORD", "admin123")
    monkeypatch.delenv("SSO_CLIENT_SECRET", raising=False)
    return monkeypatch


@pytest.fixture
def mock_keycloak():
    """In-process mock of the Keycloak admin API."""
    return MockKeycloakServer(realm=TEST_REALM, provider_id=TEST_PROVIDER_ID)


@pytest.fixture
def keycloak_http(mock_keycloak):
    """Synchronous httpx client routed to the mock server."""
    with TestClient(mock_keycloak.app) as client:
        yield client


@pytest.fixture
def admin_client(keycloak_http):
    """Admin client authenticating with the mock's admin user."""
    return KeycloakAdminClient(
        "http://testserver/",
        username="admin",
        password="admin123",
        http_client=keycloak_http,
    )
