"""
SSO integration package.

Mediates between the application and the Keycloak SSO authority:

- app.keys: Lazily resolved, cached realm signing key.
- app.federation: Federated user id encoding and decoding.
- app.validation: Access token verification.
- app.keycloak: Thin Keycloak admin REST client.
- app.translation: Provider error response translation.
- app.accounts: Account lifecycle operations (activate, deactivate,
  remove, reset password, required actions).
- app.manager: Composition root wiring the pieces together.

Design notes:
- Keep the package import side-effects minimal; module import must not
  perform network calls or read the signing key.
- Use the shared/ utilities for configuration, logging and errors.
- Nothing is cached per call except the signing key; user records,
  tokens and error bodies are always fetched fresh.
"""
