"""
Keycloak client-error translation.

Keycloak reports failures as ``{"error": ..., "error_description": ...}``
(token endpoints) or ``{"errorMessage": ...}`` (admin endpoints). The
translator parses these for operators; it never decides the outcome of
the failing operation and never raises.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.logging import get_logger
from ..keycloak.client import ProviderClientError


class ProviderErrorBody(BaseModel):
    """Structured error payload of a 4xx Keycloak response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    error: Optional[str] = None
    error_description: Optional[str] = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")


def find_client_error(exc: BaseException) -> Optional[ProviderClientError]:
    """Return the ProviderClientError that is ``exc`` or caused it, if any."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ProviderClientError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


class ProviderErrorTranslator:
    """Logs the provider's view of a failed admin call."""

    def __init__(self):
        self.logger = get_logger("sso.provider_errors")

    def translate(self, exc: BaseException) -> Optional[ProviderErrorBody]:
        client_error = find_client_error(exc)
        if client_error is None:
            return None
        return self.log_client_error(client_error)

    def log_client_error(self, error: ProviderClientError) -> Optional[ProviderErrorBody]:
        try:
            body = ProviderErrorBody.model_validate_json(error.content)
        except ValueError as exc:
            self.logger.warning(
                "Failed to parse provider error response",
                status_code=error.status,
                reason=error.reason_phrase,
                parse_error=str(exc)
            )
            return None

        self.logger.info(
            "Provider rejected request",
            status_code=error.status,
            reason=error.reason_phrase,
            error=body.error,
            error_description=body.error_description,
            error_message=body.error_message
        )
        return body
