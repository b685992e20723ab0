"""
Shared error handling for the SSO integration layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for SSO integration errors."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class UnauthorizedError(AccessLayerException):
    """Presented token is invalid, expired, inactive or from the wrong issuer."""

    status_code = 401

    def __init__(self, message: str = "You are not authorized.", details: Optional[Dict[str, Any]] = None):
        super().__init__("UNAUTHORIZED", message, details)


class ConfigurationError(AccessLayerException):
    """SSO signing key cannot be resolved from configuration."""

    status_code = 500

    def __init__(self, message: str = "Please provide the SSO public key.", details: Optional[Dict[str, Any]] = None):
        super().__init__("SSO_CONFIGURATION_ERROR", message, details)


class InvalidUserDataError(AccessLayerException):
    """Blank user identifier or failed account operation."""

    status_code = 400

    def __init__(self, message: str = "Given user data is invalid.", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_USER_DATA", message, details)


class ExternalServiceError(AccessLayerException):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)
