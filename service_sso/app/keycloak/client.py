"""
Keycloak admin REST client.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from shared.config import SSOSettings
from shared.errors import ExternalServiceError
from shared.logging import get_logger
from .models import CredentialRepresentation, RealmRepresentation, UserRepresentation

SERVICE_NAME = "keycloak"

# Refresh the admin token this many seconds before Keycloak expires it.
TOKEN_EXPIRY_MARGIN = 10


class ProviderClientError(ExternalServiceError):
    """Keycloak answered with a 4xx client error."""

    def __init__(self, response: httpx.Response):
        self.status = response.status_code
        self.reason_phrase = response.reason_phrase
        self.content = response.content
        super().__init__(
            SERVICE_NAME,
            f"{response.status_code} {response.reason_phrase}",
            details={"status_code": response.status_code, "url": str(response.request.url)}
        )


class AdminAuthenticationError(ExternalServiceError):
    """The admin token could not be obtained.

    Kept apart from ProviderClientError so a refused token request is never
    mistaken for an answer about the resource being requested.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(SERVICE_NAME, f"admin token request failed: {message}", details=details)


class KeycloakAdminClient:
    """Synchronous client for the Keycloak admin API.

    Usage mirrors the Keycloak Java admin client:
    ``client.realm("sunbird").users().get(user_id).to_representation()``.
    """

    def __init__(
        self,
        server_url: str,
        *,
        admin_realm: str = "master",
        client_id: str = "admin-cli",
        client_secret: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.admin_realm = admin_realm
        self.client_id = client_id
        self.client_secret = client_secret
        self.username = username
        self.password = password
        self.logger = get_logger("sso.keycloak")

        self._client = http_client or httpx.Client(timeout=timeout)
        self._access_token: Optional[str] = None
        self._token_expires_at: float = 0.0

    @classmethod
    def from_settings(cls, settings: SSOSettings, http_client: Optional[httpx.Client] = None) -> "KeycloakAdminClient":
        return cls(
            settings.sso_url,
            admin_realm=settings.sso_admin_realm,
            client_id=settings.sso_client_id,
            client_secret=settings.sso_client_secret,
            username=settings.sso_username,
            password=settings.sso_password,
            timeout=settings.sso_timeout,
            http_client=http_client,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def realm(self, name: str) -> "RealmResource":
        return RealmResource(self, name)

    def request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """Send an authenticated admin API request.

        Raises:
            ProviderClientError: Keycloak returned a 4xx response.
            ExternalServiceError: Keycloak returned a 5xx response or was unreachable.
        """
        headers = {"Authorization": f"Bearer {self._get_access_token()}"}
        url = f"{self.server_url}/admin/realms/{path}"
        return self._send(method, url, headers=headers, json=json)

    def _get_access_token(self) -> str:
        if self._access_token is not None and time.monotonic() < self._token_expires_at:
            return self._access_token

        if self.username:
            data = {
                "grant_type": "password",
                "client_id": self.client_id,
                "username": self.username,
                "password": self.password or "",
            }
        else:
            data = {"grant_type": "client_credentials", "client_id": self.client_id}
        if self.client_secret:
            data["client_secret"] = self.client_secret

        url = f"{self.server_url}/realms/{self.admin_realm}/protocol/openid-connect/token"
        try:
            payload = self.decode_json(self._send("POST", url, data=data))
        except ProviderClientError as exc:
            raise AdminAuthenticationError(
                f"{exc.status} {exc.reason_phrase}",
                details={"status_code": exc.status, "admin_realm": self.admin_realm}
            ) from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise AdminAuthenticationError("response has no access_token", details={"admin_realm": self.admin_realm})
        try:
            expires_in = int(payload.get("expires_in", 60))
        except (TypeError, ValueError) as exc:
            raise AdminAuthenticationError("invalid expires_in", details={"admin_realm": self.admin_realm}) from exc

        self._access_token = access_token
        self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)
        self.logger.debug("Admin token obtained", admin_realm=self.admin_realm, expires_in=expires_in)
        return self._access_token

    @staticmethod
    def decode_json(response: httpx.Response) -> Any:
        """Return the JSON body; an undecodable body is an ExternalServiceError."""
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(
                SERVICE_NAME,
                "invalid response body",
                details={"status_code": response.status_code, "url": str(response.request.url)}
            ) from exc

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            self.logger.error("Keycloak request failed", method=method, url=url, error=str(exc))
            raise ExternalServiceError(SERVICE_NAME, "unreachable", details={"error": str(exc)}) from exc

        if response.is_client_error:
            raise ProviderClientError(response)
        if response.is_server_error:
            raise ExternalServiceError(
                SERVICE_NAME,
                f"{response.status_code} {response.reason_phrase}",
                details={"status_code": response.status_code}
            )
        return response


def _parse(model: Any, response: httpx.Response) -> Any:
    try:
        return model.model_validate(KeycloakAdminClient.decode_json(response))
    except ValidationError as exc:
        raise ExternalServiceError(
            SERVICE_NAME,
            f"unexpected {model.__name__} body",
            details={"status_code": response.status_code, "url": str(response.request.url)}
        ) from exc


class RealmResource:
    def __init__(self, client: KeycloakAdminClient, name: str):
        self.client = client
        self.name = name

    def to_representation(self) -> RealmRepresentation:
        response = self.client.request("GET", quote(self.name, safe=""))
        return _parse(RealmRepresentation, response)

    def users(self) -> "UsersResource":
        return UsersResource(self.client, self.name)


class UsersResource:
    def __init__(self, client: KeycloakAdminClient, realm: str):
        self.client = client
        self.realm = realm

    def get(self, user_id: str) -> "UserResource":
        """Return a handle for ``user_id``; no request is made until it is used."""
        return UserResource(self.client, self.realm, user_id)


class UserResource:
    """Handle on a single user record."""

    def __init__(self, client: KeycloakAdminClient, realm: str, user_id: str):
        self.client = client
        self.realm = realm
        self.user_id = user_id

    @property
    def path(self) -> str:
        # Federated ids contain ':' and must stay a single path segment.
        return f"{quote(self.realm, safe='')}/users/{quote(self.user_id, safe='')}"

    def to_representation(self) -> UserRepresentation:
        response = self.client.request("GET", self.path)
        return _parse(UserRepresentation, response)

    def update(self, representation: UserRepresentation) -> None:
        self.client.request(
            "PUT",
            self.path,
            json=representation.model_dump(by_alias=True, exclude_none=True),
        )

    def remove(self) -> None:
        self.client.request("DELETE", self.path)

    def reset_password(self, credential: CredentialRepresentation) -> None:
        self.client.request("PUT", f"{self.path}/reset-password", json=credential.model_dump())
