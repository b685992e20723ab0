"""
Account lifecycle operations against the Keycloak realm.

Failure contracts differ per operation and existing callers rely on them:

- set_enabled / activate / deactivate / remove: InvalidUserDataError
- reset_password: returns False
- set_required_action: provider errors propagate unchanged
"""

from typing import Callable, Optional

from shared.config import SSOSettings, get_settings
from shared.errors import ExternalServiceError, InvalidUserDataError
from shared.logging import get_logger
from ..federation.codec import FederationIdentityCodec
from ..keycloak.client import KeycloakAdminClient, ProviderClientError, UserResource
from ..keycloak.models import CredentialRepresentation
from ..translation.provider_errors import ProviderErrorTranslator

SUCCESS = "SUCCESS"


class AccountStateManager:
    """Activates, deactivates, removes and updates federated users."""

    def __init__(
        self,
        client: KeycloakAdminClient,
        codec: Optional[FederationIdentityCodec] = None,
        translator: Optional[ProviderErrorTranslator] = None,
        settings_provider: Callable[[], SSOSettings] = get_settings,
    ):
        self.client = client
        self.codec = codec or FederationIdentityCodec()
        self.translator = translator or ProviderErrorTranslator()
        self.settings_provider = settings_provider
        self.logger = get_logger("sso.accounts")

    def federated_id(self, user_id: str) -> str:
        """Validate ``user_id`` and return its federated form.

        Raises InvalidUserDataError before any provider call.
        """
        if not user_id or not user_id.strip():
            raise InvalidUserDataError("User id is required")
        fed_user_id = self.codec.encode(user_id)
        if not fed_user_id.strip():
            raise InvalidUserDataError("Federated user id is blank")
        return fed_user_id

    def _user(self, fed_user_id: str) -> UserResource:
        realm = self.settings_provider().sso_realm
        return self.client.realm(realm).users().get(fed_user_id)

    def set_enabled(self, user_id: str, enabled: bool) -> None:
        fed_user_id = self.federated_id(user_id)
        self.logger.info("Updating user status", fed_user_id=fed_user_id, enabled=enabled)

        try:
            resource = self._user(fed_user_id)
            representation = resource.to_representation()
            representation.enabled = enabled
            resource.update(representation)
        except ExternalServiceError as exc:
            self.translator.translate(exc)
            self.logger.error(
                "Failed to update user status",
                fed_user_id=fed_user_id,
                enabled=enabled,
                error=str(exc)
            )
            raise InvalidUserDataError(details={"user_id": user_id}) from exc

    def activate_user(self, user_id: str) -> str:
        self.set_enabled(user_id, True)
        return SUCCESS

    def deactivate_user(self, user_id: str) -> str:
        self.set_enabled(user_id, False)
        return SUCCESS

    def remove_user(self, user_id: str) -> str:
        """Delete the user; a record Keycloak does not know is a no-op.

        A 404 only counts as an absent record once the realm itself is
        confirmed, so a misconfigured realm still fails.
        """
        fed_user_id = self.federated_id(user_id)
        realm = self.settings_provider().sso_realm

        try:
            try:
                self.client.realm(realm).users().get(fed_user_id).remove()
            except ProviderClientError as exc:
                if exc.status != 404:
                    raise
                self.client.realm(realm).to_representation()
                self.logger.info("User already absent", fed_user_id=fed_user_id, realm=realm)
                return SUCCESS
        except ExternalServiceError as exc:
            self.translator.translate(exc)
            self.logger.error("Failed to remove user", fed_user_id=fed_user_id, realm=realm, error=str(exc))
            raise InvalidUserDataError(details={"user_id": user_id}) from exc

        self.logger.info("User removed", fed_user_id=fed_user_id)
        return SUCCESS

    def reset_password(self, user_id: str, password: str) -> bool:
        """Replace the user's password; returns False if Keycloak refuses."""
        fed_user_id = self.federated_id(user_id)
        credential = CredentialRepresentation(value=password)

        try:
            self._user(fed_user_id).reset_password(credential)
        except ExternalServiceError as exc:
            self.translator.translate(exc)
            self.logger.error("Failed to reset password", fed_user_id=fed_user_id, error=str(exc))
            return False
        return True

    def set_required_action(self, user_id: str, action: str) -> None:
        """Replace the user's required actions with ``[action]``."""
        fed_user_id = self.federated_id(user_id)
        resource = self._user(fed_user_id)

        representation = resource.to_representation()
        representation.required_actions = [action]
        resource.update(representation)
        self.logger.info("Required action set", fed_user_id=fed_user_id, action=action)
