"""
SSO manager for the integration layer.

Wires configuration, the signing key cache, token verification and the
account operations into the single object the surrounding service uses.
"""

from typing import Callable, Optional

import httpx

from shared.config import SSOSettings, get_settings
from shared.logging import configure_logging, get_logger, set_user_context
from .accounts.manager import AccountStateManager
from .accounts.models import PasswordUpdateRequest, RequiredActionRequest, UserRequest
from .federation.codec import FederationIdentityCodec
from .keycloak.client import KeycloakAdminClient
from .keys.public_key_cache import PublicKeyCache
from .translation.provider_errors import ProviderErrorTranslator
from .validation.token_verifier import TokenVerifier

SERVICE_NAME = "sso"


class SSOManager:
    """Token verification and account lifecycle against Keycloak."""

    def __init__(self, verifier: TokenVerifier, accounts: AccountStateManager):
        self.verifier = verifier
        self.accounts = accounts
        self.logger = get_logger("sso.manager")

    def verify_token(self, token: str, url: Optional[str] = None) -> Optional[str]:
        """Return the raw user id of a valid token; ``url`` overrides the SSO base url."""
        set_user_context(user_id=None)
        user_id = self.verifier.verify(token, url)
        set_user_context(user_id=user_id)
        return user_id

    def activate_user(self, request: UserRequest) -> str:
        return self.accounts.activate_user(request.user_id)

    def deactivate_user(self, request: UserRequest) -> str:
        return self.accounts.deactivate_user(request.user_id)

    def remove_user(self, request: UserRequest) -> str:
        return self.accounts.remove_user(request.user_id)

    def update_password(self, request: PasswordUpdateRequest) -> bool:
        return self.accounts.reset_password(request.user_id, request.password)

    def set_required_action(self, request: RequiredActionRequest) -> None:
        self.accounts.set_required_action(request.user_id, request.action)

    def close(self) -> None:
        self.accounts.client.close()


def create_sso_manager(
    settings: Optional[SSOSettings] = None,
    http_client: Optional[httpx.Client] = None,
    configure_logs: bool = False,
) -> SSOManager:
    """Build an SSOManager.

    Without explicit ``settings`` every component reads the environment
    at call time, so configuration fixes apply without a restart. Logging
    is left to the host application unless ``configure_logs`` is set.
    """
    if settings is not None:
        fixed_settings = settings
        settings_provider: Callable[[], SSOSettings] = lambda: fixed_settings
    else:
        settings_provider = get_settings

    current = settings_provider()
    if configure_logs:
        configure_logging(SERVICE_NAME, current.log_level)

    codec = FederationIdentityCodec(lambda: settings_provider().sso_federation_provider_id)
    key_cache = PublicKeyCache(lambda: settings_provider().sso_public_key)
    verifier = TokenVerifier(key_cache, codec, settings_provider)
    accounts = AccountStateManager(
        KeycloakAdminClient.from_settings(current, http_client=http_client),
        codec,
        ProviderErrorTranslator(),
        settings_provider,
    )
    return SSOManager(verifier, accounts)
