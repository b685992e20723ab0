"""
Federation id package.

Keycloak stores users backed by a user-storage federation provider under
ids of the form ``f:<provider-id>:<user-id>``.
"""

from .codec import FederationIdentityCodec, encode_federated_id, decode_subject

__all__ = ["FederationIdentityCodec", "encode_federated_id", "decode_subject"]
