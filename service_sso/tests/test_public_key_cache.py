"""
Unit tests for PublicKeyCache.
"""

import base64
import threading

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from service_sso.app.keys.public_key_cache import PublicKeyCache, load_public_key


class TestLoadPublicKey:
    """Test cases for parsing the configured key."""

    def test_valid_key(self, key_pair):
        """Test a base64 X.509 RSA key parses."""
        material = load_public_key(key_pair.public_key_b64)

        assert material is not None
        assert material.key.key_size == 2048
        assert material.pem.startswith("-----BEGIN PUBLIC KEY-----")

    def test_missing_key(self):
        """Test missing or blank values."""
        assert load_public_key(None) is None
        assert load_public_key("") is None
        assert load_public_key("   ") is None

    def test_malformed_key(self):
        """Test bad base64 and non-DER content."""
        assert load_public_key("not base64 at all!") is None
        assert load_public_key(base64.b64encode(b"garbage").decode()) is None

    def test_non_rsa_key(self):
        """Test an EC key is refused."""
        ec_key = ec.generate_private_key(ec.SECP256R1()).public_key()
        der = ec_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        assert load_public_key(base64.b64encode(der).decode()) is None


class TestPublicKeyCache:
    """Test cases for caching behavior."""

    def test_resolves_once(self, key_pair):
        """Test the source is read only until a key resolves."""
        calls = []

        def source():
            calls.append(1)
            return key_pair.public_key_b64

        cache = PublicKeyCache(source)
        first = cache.get_public_key()
        second = cache.get_public_key()

        assert first is not None
        assert first is second
        assert len(calls) == 1

    def test_failure_is_not_cached(self, key_pair):
        """Test a failed resolution is retried on the next call."""
        values = [None, "broken", key_pair.public_key_b64, "ignored"]
        cache = PublicKeyCache(lambda: values.pop(0))

        assert cache.get_public_key() is None
        assert cache.get_public_key() is None
        resolved = cache.get_public_key()
        assert resolved is not None
        assert cache.get_public_key() is resolved
        assert values == ["ignored"]

    def test_reads_environment(self, monkeypatch, key_pair):
        """Test the default source is SSO_PUBLIC_KEY."""
        monkeypatch.delenv("SSO_PUBLIC_KEY", raising=False)
        cache = PublicKeyCache()
        assert cache.get_public_key() is None

        monkeypatch.setenv("SSO_PUBLIC_KEY", key_pair.public_key_b64)
        assert cache.get_public_key() is not None

    def test_concurrent_first_calls_converge(self, key_pair):
        """Test racing first calls all see the same key."""
        cache = PublicKeyCache(lambda: key_pair.public_key_b64)
        results = []

        def worker():
            results.append(cache.get_public_key())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)
        assert results[0] is not None
