"""
Token validation package.

Verifies access tokens issued by the Keycloak realm against the cached
realm public key:

- Signature (RS256/RS384/RS512), issuer, expiry and activity checks.
- Token type check for tokens that declare one.
- Subject extraction, decoded from its federated form.

Every call re-verifies from the raw signature; no verdicts are cached.
"""

from .token_verifier import TokenVerifier, VerifiedTokenClaims, build_issuer

__all__ = ["TokenVerifier", "VerifiedTokenClaims", "build_issuer"]
