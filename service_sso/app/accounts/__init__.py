"""
Account lifecycle package.

Each operation resolves the federated id, then delegates to the Keycloak
admin client. Failure contracts differ per operation; see the manager.
"""

from .manager import AccountStateManager, SUCCESS
from .models import UserRequest, PasswordUpdateRequest, RequiredActionRequest

__all__ = [
    "AccountStateManager",
    "SUCCESS",
    "UserRequest",
    "PasswordUpdateRequest",
    "RequiredActionRequest",
]
