"""
Shared utilities for the SSO integration layer.

This package aggregates common building blocks consumed by the service:

- config: Keycloak and federation settings via pydantic-settings
- logging: Structured logging with request correlation
- errors: Canonical error types and responses
- test_helpers: RSA key and access token factories for tests

Do not import from service_* packages into shared/.
"""
