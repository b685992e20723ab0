"""
Access token verification for the SSO realm.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Union

from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel, ConfigDict

from shared.config import SSOSettings, get_settings
from shared.errors import ConfigurationError, UnauthorizedError
from shared.logging import get_logger
from ..federation.codec import FederationIdentityCodec
from ..keys.public_key_cache import PublicKeyCache

ALGORITHMS = ["RS256", "RS384", "RS512"]
TOKEN_TYPE = "Bearer"


class TokenRejectedError(Exception):
    """Token has a valid signature but must not be accepted."""


class VerifiedTokenClaims(BaseModel):
    """Claims of a token whose signature and issuer have been verified."""

    model_config = ConfigDict(extra="allow")

    sub: Optional[str] = None
    iss: str
    aud: Optional[Union[str, List[str]]] = None
    exp: int
    nbf: Optional[int] = None
    iat: Optional[int] = None
    jti: Optional[str] = None
    azp: Optional[str] = None
    typ: Optional[str] = None

    def is_expired(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.exp

    def is_active(self, now: Optional[float] = None) -> bool:
        """Not expired and past its not-before time."""
        now = time.time() if now is None else now
        if self.is_expired(now):
            return False
        return self.nbf is None or self.nbf <= now


def build_issuer(base_url: str, realm: str) -> str:
    """Expected ``iss`` claim for tokens minted by ``realm``."""
    return f"{base_url.rstrip('/')}/realms/{realm}"


class TokenVerifier:
    """Verifies realm access tokens and returns the raw user id."""

    def __init__(
        self,
        key_cache: PublicKeyCache,
        codec: Optional[FederationIdentityCodec] = None,
        settings_provider: Callable[[], SSOSettings] = get_settings,
    ):
        self.key_cache = key_cache
        self.codec = codec or FederationIdentityCodec()
        self.settings_provider = settings_provider
        self.logger = get_logger("sso.verifier")

    def verify(self, token: str, issuer_url: Optional[str] = None) -> Optional[str]:
        """Verify ``token`` and return the subject's raw user id.

        Raises:
            ConfigurationError: The realm public key cannot be resolved.
            UnauthorizedError: The token failed any verification check.
        """
        public_key = self.key_cache.get_public_key()
        if public_key is None:
            self.logger.error("Cannot verify token: SSO public key is unavailable")
            raise ConfigurationError()

        settings = self.settings_provider()
        expected_issuer = build_issuer(issuer_url or settings.sso_url, settings.sso_realm)

        if token.startswith("Bearer "):
            token = token[7:]

        try:
            claims = self._decode(token, public_key.pem, expected_issuer)
        except (JOSEError, ValueError, TypeError, TokenRejectedError) as exc:
            self.logger.warning(
                "Token verification failed",
                error=str(exc),
                error_type=type(exc).__name__,
                expected_issuer=expected_issuer
            )
            raise UnauthorizedError() from exc

        self.logger.info(
            "Token verified",
            token_id=claims.jti,
            issued_for=claims.azp,
            subject=claims.sub,
            active=True,
            expires_at=claims.exp
        )

        subject = claims.sub
        if not subject or not subject.strip():
            return subject
        return self.codec.decode(subject)

    def _decode(self, token: str, pem: str, expected_issuer: str) -> VerifiedTokenClaims:
        options: Dict[str, Any] = {
            "verify_signature": True,
            "verify_aud": False,
            "verify_iss": True,
            "verify_exp": True,
            "verify_nbf": True,
            "require_exp": True,
        }
        payload = jwt.decode(
            token,
            pem,
            algorithms=ALGORITHMS,
            issuer=expected_issuer,
            options=options,
        )
        claims = VerifiedTokenClaims.model_validate(payload)

        if not claims.is_active():
            raise TokenRejectedError("Token is not active")
        if claims.typ is not None and claims.typ.lower() != TOKEN_TYPE.lower():
            raise TokenRejectedError(f"Unexpected token type: {claims.typ}")

        return claims
