"""
Signing key package.

Resolves the realm's RSA public key from configuration once and keeps
it for the lifetime of the cache. Failed resolutions are not cached.
"""

from .public_key_cache import PublicKeyCache, PublicKeyMaterial, load_public_key

__all__ = ["PublicKeyCache", "PublicKeyMaterial", "load_public_key"]
