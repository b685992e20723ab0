"""
Typed requests for account operations.
"""

from pydantic import BaseModel


class UserRequest(BaseModel):
    """Request targeting a single user by raw user id."""
    user_id: str


class PasswordUpdateRequest(BaseModel):
    """Request to replace a user's password."""
    user_id: str
    password: str


class RequiredActionRequest(BaseModel):
    """Request to force a required action (e.g. UPDATE_PASSWORD) on next login."""
    user_id: str
    action: str
