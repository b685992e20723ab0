"""Translation of Keycloak client-error responses for diagnostics."""

from .provider_errors import ProviderErrorBody, ProviderErrorTranslator, find_client_error

__all__ = ["ProviderErrorBody", "ProviderErrorTranslator", "find_client_error"]
