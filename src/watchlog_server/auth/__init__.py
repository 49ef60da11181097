"""Login flow and session handling."""

from .oidc import OIDCClient
from .session import get_session, save_session

__all__ = ["OIDCClient", "get_session", "save_session"]
