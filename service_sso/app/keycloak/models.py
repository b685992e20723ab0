"""
Keycloak admin API representations.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

PASSWORD = "password"


class UserRepresentation(BaseModel):
    """Provider-side user record; unknown fields are carried through on update."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    enabled: Optional[bool] = None
    email_verified: Optional[bool] = Field(default=None, alias="emailVerified")
    required_actions: List[str] = Field(default_factory=list, alias="requiredActions")
    federation_link: Optional[str] = Field(default=None, alias="federationLink")


class CredentialRepresentation(BaseModel):
    """Credential update submitted to the reset-password endpoint."""

    type: str = PASSWORD
    value: str
    temporary: bool = False


class RealmRepresentation(BaseModel):
    """Realm summary; only used to confirm the realm exists."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    realm: Optional[str] = None
    enabled: Optional[bool] = None
