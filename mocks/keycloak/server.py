"""
Mock Keycloak server providing the admin token grant and user admin endpoints.
"""

import itertools
from typing import Dict, Any, Optional, List, Tuple, Union
from urllib.parse import parse_qs

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from shared.logging import get_logger
from shared.test_helpers import create_test_users

ErrorBody = Union[Dict[str, Any], bytes]


class MockKeycloakServer:
    """Mock Keycloak server implementation."""

    def __init__(
        self,
        realm: str = "sunbird",
        provider_id: str = "sunbird",
        admin_realm: str = "master",
        client_id: str = "admin-cli",
        admin_username: str = "admin",
        admin_password: str = "admin123",
    ):
        self.logger = get_logger("mock.keycloak")
        self.app = FastAPI(title="Mock Keycloak", version="1.0.0")

        self.realm = realm
        self.admin_realm = admin_realm
        self.client_id = client_id
        self.admin_username = admin_username
        self.admin_password = admin_password

        # Federated id -> Keycloak user representation
        self.users: Dict[str, Dict[str, Any]] = {}
        for user in create_test_users(provider_id):
            self.users[user.user_id] = {
                "id": user.user_id,
                "username": user.username,
                "email": user.email,
                "enabled": user.enabled,
                "requiredActions": list(user.required_actions),
                "federationLink": provider_id,
            }
        self.passwords: Dict[str, str] = {}

        # (method, path) of every admin call, for assertions
        self.calls: List[Tuple[str, str]] = []
        self.issued_tokens: List[str] = []
        self._token_counter = itertools.count(1)
        self._failures: List[Tuple[int, ErrorBody]] = []

        self._setup_routes()

    def fail_next(self, status_code: int, body: ErrorBody) -> None:
        """Answer the next admin call with ``status_code`` and ``body``."""
        self._failures.append((status_code, body))

    def _error(self, status_code: int, body: ErrorBody) -> Response:
        if isinstance(body, bytes):
            return Response(content=body, status_code=status_code, media_type="text/plain")
        return JSONResponse(status_code=status_code, content=body)

    def _admin_guard(self, request: Request, realm: str) -> Optional[Response]:
        """Record the call and return an error response if it must fail."""
        self.calls.append((request.method, request.url.path))

        authorization = request.headers.get("Authorization", "")
        if not authorization.startswith("Bearer ") or authorization[7:] not in self.issued_tokens:
            return self._error(401, {"error": "HTTP 401 Unauthorized"})
        if self._failures:
            return self._error(*self._failures.pop(0))
        if realm != self.realm:
            return self._error(404, {"error": "Realm not found."})
        return None

    def _setup_routes(self):
        """Set up mock Keycloak routes."""

        @self.app.post("/realms/{realm}/protocol/openid-connect/token")
        async def token_endpoint(realm: str, request: Request):
            """Token endpoint for the admin client."""
            if realm != self.admin_realm:
                return self._error(404, {"error": "Realm does not exist"})

            form = {key: values[0] for key, values in parse_qs((await request.body()).decode()).items()}
            if form.get("client_id") != self.client_id:
                return self._error(401, {"error": "invalid_client", "error_description": "Invalid client credentials"})

            grant_type = form.get("grant_type")
            if grant_type == "password":
                if form.get("username") != self.admin_username or form.get("password") != self.admin_password:
                    return self._error(401, {"error": "invalid_grant", "error_description": "Invalid user credentials"})
            elif grant_type != "client_credentials":
                return self._error(400, {"error": "unsupported_grant_type", "error_description": "Unsupported grant_type"})

            access_token = f"mock-admin-token-{next(self._token_counter)}"
            self.issued_tokens.append(access_token)
            return {
                "access_token": access_token,
                "expires_in": 60,
                "refresh_expires_in": 0,
                "token_type": "Bearer",
                "not-before-policy": 0,
            }

        @self.app.get("/admin/realms/{realm}")
        async def get_realm(realm: str, request: Request):
            """Get realm summary."""
            error = self._admin_guard(request, realm)
            if error is not None:
                return error
            return {"id": realm, "realm": realm, "enabled": True}

        @self.app.get("/admin/realms/{realm}/users/{user_id}")
        async def get_user(realm: str, user_id: str, request: Request):
            """Get user by ID."""
            error = self._admin_guard(request, realm)
            if error is not None:
                return error
            if user_id not in self.users:
                return self._error(404, {"error": "User not found"})
            return self.users[user_id]

        @self.app.put("/admin/realms/{realm}/users/{user_id}")
        async def update_user(realm: str, user_id: str, request: Request):
            """Update user representation."""
            error = self._admin_guard(request, realm)
            if error is not None:
                return error
            if user_id not in self.users:
                return self._error(404, {"error": "User not found"})

            representation = await request.json()
            representation.pop("id", None)
            self.users[user_id].update(representation)
            return Response(status_code=204)

        @self.app.delete("/admin/realms/{realm}/users/{user_id}")
        async def delete_user(realm: str, user_id: str, request: Request):
            """Delete user."""
            error = self._admin_guard(request, realm)
            if error is not None:
                return error
            if self.users.pop(user_id, None) is None:
                return self._error(404, {"error": "User not found"})
            return Response(status_code=204)

        @self.app.put("/admin/realms/{realm}/users/{user_id}/reset-password")
        async def reset_password(realm: str, user_id: str, request: Request):
            """Reset user password."""
            error = self._admin_guard(request, realm)
            if error is not None:
                return error
            if user_id not in self.users:
                return self._error(404, {"error": "User not found"})

            credential = await request.json()
            if credential.get("type") != "password" or not credential.get("value"):
                return self._error(400, {
                    "error": "invalidPasswordMinLengthMessage",
                    "error_description": "Invalid password: minimum length 1.",
                })
            self.passwords[user_id] = credential["value"]
            return Response(status_code=204)


def create_app():
    """Create mock Keycloak application."""
    server = MockKeycloakServer()
    return server.app
