"""
Shared configuration management for the SSO integration layer.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SSOSettings(BaseSettings):
    """Keycloak connection and federation settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Identity provider
    sso_url: str = Field(default="http://localhost:8080/auth/")
    sso_realm: str = Field(default="sunbird")
    sso_public_key: Optional[str] = Field(default=None)
    sso_federation_provider_id: str = Field(default="")

    # Admin client
    sso_admin_realm: str = Field(default="master")
    sso_client_id: str = Field(default="admin-cli")
    sso_client_secret: Optional[str] = Field(default=None)
    sso_username: Optional[str] = Field(default=None)
    sso_password: Optional[str] = Field(default=None)
    sso_timeout: float = Field(default=10.0)


def get_settings() -> SSOSettings:
    """Read settings from the environment.

    Built fresh on every call; only the SSO public key is cached, and
    that happens in the key cache rather than here.
    """
    return SSOSettings()
