"""Encrypted cookie-backed session."""

import base64
import hashlib
import logging
from functools import lru_cache
from typing import Mapping, Optional

from cryptography.fernet import Fernet, InvalidToken
from fastapi import Request, Response
from pydantic import ValidationError

from ..core.config import settings
from ..models.user import SessionData

logger = logging.getLogger(__name__)

SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 7


class SessionCodec:
    """Encrypts session data into a cookie value and back."""

    def __init__(self, secret: str):
        """
        Initialize with a session secret.

        Args:
            secret: Any string; a Fernet key is derived from it
        """
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode()).digest())
        self._fernet = Fernet(key)

    def encode(self, session: SessionData) -> str:
        payload = session.model_dump_json(exclude_none=True)
        return self._fernet.encrypt(payload.encode()).decode()

    def decode(self, token: Optional[str]) -> SessionData:
        """Decrypt a cookie value. Missing, tampered or stale cookies give an empty session."""
        if not token:
            return SessionData()

        try:
            payload = self._fernet.decrypt(token.encode())
        except InvalidToken:
            logger.warning("Ignoring session cookie that failed to decrypt")
            return SessionData()

        try:
            return SessionData.model_validate_json(payload)
        except ValidationError:
            logger.warning("Ignoring session cookie with invalid contents")
            return SessionData()


@lru_cache
def get_codec() -> SessionCodec:
    return SessionCodec(settings.session_secret)


def session_from_cookies(cookies: Mapping[str, str]) -> SessionData:
    return get_codec().decode(cookies.get(settings.session_cookie_name))


def get_session(request: Request) -> SessionData:
    """Read the session of the current request."""
    return session_from_cookies(request.cookies)


def save_session(response: Response, session: SessionData) -> None:
    """Write the session into the response cookie."""
    response.set_cookie(
        settings.session_cookie_name,
        get_codec().encode(session),
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
