"""Title search API endpoints."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from watchlog_server.api.deps import TMDBClientDep, UserDep
from watchlog_server.auth.session import session_from_cookies
from watchlog_server.core.config import settings
from watchlog_server.models.metadata import SearchResult
from watchlog_server.services.search_session import SearchSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=list[SearchResult])
async def search_titles(
    q: str,
    tmdb_client: TMDBClientDep,
    _: UserDep,
) -> list[SearchResult]:
    """Search movies and series by title."""
    return await tmdb_client.search(q)


@router.websocket("/ws")
async def search_as_you_type(websocket: WebSocket, tmdb_client: TMDBClientDep) -> None:
    """
    Debounced search over a WebSocket.

    The client sends {"query": "..."} on every keystroke and receives
    {"query": ..., "results": [...]} once typing pauses.
    """
    if settings.auth_enabled:
        session = session_from_cookies(websocket.cookies)
        if not session.is_logged_in:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

    await websocket.accept()
    search_session = SearchSession(tmdb_client, websocket.send_json)

    try:
        while True:
            message = await websocket.receive_json()
            query = message.get("query", "") if isinstance(message, dict) else ""
            await search_session.on_query(str(query))
    except WebSocketDisconnect:
        logger.debug("Search client disconnected")
    finally:
        search_session.close()
