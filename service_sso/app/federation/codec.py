"""
Federated user id codec.
"""

from typing import Callable, Optional

from shared.config import get_settings
from shared.errors import InvalidUserDataError

FEDERATION_TAG = "f"
DELIMITER = ":"


def encode_federated_id(user_id: str, provider_id: str) -> str:
    """Return ``f:<provider_id>:<user_id>``.

    Raw ids containing the delimiter are rejected; they could not be
    recovered from a token subject.
    """
    if DELIMITER in user_id:
        raise InvalidUserDataError(
            "User id must not contain ':'",
            details={"user_id": user_id}
        )
    return DELIMITER.join((FEDERATION_TAG, provider_id, user_id))


def decode_subject(subject: str) -> str:
    """Return the raw user id carried by a token subject.

    Subjects without a delimiter were never federation-encoded and are
    returned unchanged.
    """
    if DELIMITER not in subject:
        return subject
    return subject.rsplit(DELIMITER, 1)[1]


def _configured_provider_id() -> str:
    return get_settings().sso_federation_provider_id


class FederationIdentityCodec:
    """Maps raw user ids to Keycloak federated ids and back."""

    def __init__(self, provider_id_source: Optional[Callable[[], str]] = None):
        self._provider_id_source = provider_id_source or _configured_provider_id

    def encode(self, user_id: str) -> str:
        return encode_federated_id(user_id, self._provider_id_source())

    def decode(self, subject: str) -> str:
        return decode_subject(subject)
