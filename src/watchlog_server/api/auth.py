"""Login, callback and logout endpoints."""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse

from watchlog_server.api.deps import OIDCClientDep
from watchlog_server.auth.oidc import new_code_verifier, new_state, user_from_claims
from watchlog_server.auth.session import get_session, save_session
from watchlog_server.database.session import SessionLocal
from watchlog_server.models.user import SessionData, User
from watchlog_server.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _base_url(request: Request) -> str:
    proto = request.headers.get("x-forwarded-proto", "https")
    host = request.headers.get("host", request.url.netloc)
    return f"{proto}://{host}"


def _callback_url(request: Request) -> str:
    return f"{_base_url(request)}/api/callback"


@router.get("/login")
async def login(request: Request, oidc_client: OIDCClientDep) -> RedirectResponse:
    """Start the authorization code flow."""
    session = get_session(request)
    session.code_verifier = new_code_verifier()
    session.state = new_state()

    url = await oidc_client.build_authorization_url(
        _callback_url(request), session.state, session.code_verifier
    )

    response = RedirectResponse(url, status_code=302)
    save_session(response, session)
    return response


@router.get("/callback")
async def callback(request: Request, oidc_client: OIDCClientDep) -> RedirectResponse:
    """Finish login: exchange the code, store the user and mark the session."""
    session = get_session(request)
    if not session.code_verifier or not session.state:
        return RedirectResponse("/api/login", status_code=302)

    try:
        token, claims = await oidc_client.exchange_code(
            str(request.url), _callback_url(request), session.code_verifier, session.state
        )
        user = user_from_claims(claims)

        async with SessionLocal() as db:
            await UserRepository(db).upsert(user)
            await db.commit()
    except Exception as e:
        logger.error(f"Login callback failed: {e}")
        return RedirectResponse("/api/login", status_code=302)

    expires_at = token.get("expires_at")
    if expires_at is None and token.get("expires_in"):
        expires_at = int(time.time()) + int(token["expires_in"])

    new_session = SessionData(
        user_id=user.id,
        access_token=token.get("access_token"),
        refresh_token=token.get("refresh_token"),
        id_token=token.get("id_token"),
        expires_at=int(expires_at) if expires_at is not None else None,
        is_logged_in=True,
    )
    logger.info(f"User {user.id} logged in")

    response = RedirectResponse("/", status_code=302)
    save_session(response, new_session)
    return response


@router.get("/logout")
async def logout(request: Request, oidc_client: OIDCClientDep) -> RedirectResponse:
    """Clear the session and log out at the provider."""
    session = get_session(request)
    url = await oidc_client.build_end_session_url(_base_url(request), session.id_token)
    response = RedirectResponse(url, status_code=302)
    save_session(response, SessionData())
    return response


@router.get("/auth/user", response_model=User)
async def current_user(request: Request):
    """Get the logged-in user, or 401 with a null body."""
    session = get_session(request)
    if not session.is_logged_in or not session.user_id:
        return JSONResponse(None, status_code=401)

    async with SessionLocal() as db:
        user = await UserRepository(db).get_user(session.user_id)

    if user is None:
        return JSONResponse(None, status_code=401)
    return user
