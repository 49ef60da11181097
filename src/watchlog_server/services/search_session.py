"""Search-as-you-type state for one client connection."""

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import WebSocketDisconnect

from ..core.config import settings
from ..core.errors import WatchlogError
from ..models.metadata import SearchResult
from .debounce import Debouncer
from .tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


class SearchSession:
    """Debounces typed queries and pushes results back to the client."""

    def __init__(
        self,
        tmdb_client: TMDBClient,
        send: Callable[[dict[str, Any]], Awaitable[None]],
        debounce_seconds: Optional[float] = None,
    ):
        """
        Initialize search session.

        Args:
            tmdb_client: Metadata client
            send: Callback delivering a message to the client
            debounce_seconds: Quiet period (defaults to settings)
        """
        self.tmdb_client = tmdb_client
        self._send = send
        self._debouncer = Debouncer(
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.results: list[SearchResult] = []
        self._closed = False

    async def on_query(self, query: str) -> None:
        """
        Handle a keystroke.

        Queries below the minimum length clear the results right away and
        never reach the API.
        """
        if len(query) < settings.search_min_query_length:
            self._debouncer.cancel_pending()
            self.results = []
            await self._send({"query": query, "results": []})
            return

        self._debouncer.submit(lambda: self._search(query))

    async def _search(self, query: str) -> None:
        try:
            self.results = await self.tmdb_client.search(query)
        except WatchlogError as e:
            logger.error(f"Search failed for '{query}': {e.message}")
            self.results = []
            await self._deliver({"query": query, "error": e.message})
            return

        await self._deliver(
            {"query": query, "results": [r.model_dump(mode="json") for r in self.results]}
        )

    async def _deliver(self, message: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._send(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            # The client went away between the query and the result
            logger.debug(f"Dropped search result for '{message.get('query')}': {e!r}")

    def close(self) -> None:
        """Stop delivering results and cancel searches still in flight."""
        self._closed = True
        self._debouncer.cancel_all()
