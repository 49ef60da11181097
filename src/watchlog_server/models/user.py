"""User and session models."""

from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """A user known from OIDC claims."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    profile_image_url: Optional[str] = None


class SessionData(BaseModel):
    """State held in the encrypted session cookie."""

    code_verifier: Optional[str] = None
    state: Optional[str] = None
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None
    expires_at: Optional[int] = None
    is_logged_in: bool = False
