"""
Realm signing key cache.
"""

from __future__ import annotations

import base64
import binascii
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from shared.config import get_settings
from shared.logging import get_logger

logger = get_logger("sso.keys")


@dataclass(frozen=True)
class PublicKeyMaterial:
    """Resolved RSA public key of the SSO realm."""

    key: rsa.RSAPublicKey
    pem: str


def _configured_public_key() -> Optional[str]:
    return get_settings().sso_public_key


def load_public_key(encoded: Optional[str]) -> Optional[PublicKeyMaterial]:
    """Build the realm key from a base64 X.509 SubjectPublicKeyInfo string.

    Returns None instead of raising when the value is missing or unusable.
    """
    if not encoded or not encoded.strip():
        logger.warning("SSO public key is not configured")
        return None

    try:
        der = base64.b64decode(encoded.strip(), validate=True)
        key = serialization.load_der_public_key(der)
    except (binascii.Error, ValueError, UnsupportedAlgorithm) as exc:
        logger.warning("Failed to parse SSO public key", error=str(exc))
        return None

    if not isinstance(key, rsa.RSAPublicKey):
        logger.warning("SSO public key is not an RSA key", key_type=type(key).__name__)
        return None

    pem = key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return PublicKeyMaterial(key=key, pem=pem)


class PublicKeyCache:
    """Lazily resolves the realm public key and keeps the first success.

    A failed resolution is not remembered, so the next call reads the
    configuration again. Once a key resolves it is kept for good.
    """

    def __init__(self, key_source: Optional[Callable[[], Optional[str]]] = None) -> None:
        self._key_source = key_source or _configured_public_key
        self._key: Optional[PublicKeyMaterial] = None
        self._lock = threading.Lock()

    def get_public_key(self) -> Optional[PublicKeyMaterial]:
        key = self._key
        if key is not None:
            return key

        with self._lock:
            if self._key is None:
                self._key = load_public_key(self._key_source())
                if self._key is not None:
                    logger.info("SSO public key resolved", key_size=self._key.key.key_size)
            return self._key
