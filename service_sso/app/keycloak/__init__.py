"""
Keycloak admin client package.

A synchronous httpx client for the handful of admin REST calls the
account operations need. No retries; timeouts come from configuration.
"""

from .client import (
    KeycloakAdminClient,
    RealmResource,
    UsersResource,
    UserResource,
    ProviderClientError,
    AdminAuthenticationError,
)
from .models import UserRepresentation, CredentialRepresentation, RealmRepresentation

__all__ = [
    "KeycloakAdminClient",
    "RealmResource",
    "UsersResource",
    "UserResource",
    "ProviderClientError",
    "AdminAuthenticationError",
    "UserRepresentation",
    "CredentialRepresentation",
    "RealmRepresentation",
]
