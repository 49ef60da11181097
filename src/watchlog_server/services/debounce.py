"""Trailing-edge debounce for async calls."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs only the last submitted call after a quiet period.

    A submission still waiting out its delay is cancelled by the next one.
    Once a call has started, later submissions leave it alone; only
    cancel_all() stops it.
    """

    def __init__(self, delay_seconds: float):
        self.delay_seconds = delay_seconds
        self._waiting: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()

    def submit(self, func: Callable[[], Awaitable[T]]) -> "asyncio.Task[T]":
        """
        Schedule a call after the quiet period.

        Args:
            func: Coroutine function to run

        Returns:
            Task running the call; cancelled if superseded while waiting
        """
        self.cancel_pending()
        task = asyncio.create_task(self._run(func))
        self._waiting = task
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    async def _run(self, func: Callable[[], Awaitable[T]]) -> T:
        await asyncio.sleep(self.delay_seconds)
        if self._waiting is asyncio.current_task():
            self._waiting = None
        return await func()

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Debounced call failed: {error!r}")

    def cancel_pending(self) -> None:
        """Cancel a submission that has not started yet."""
        if self._waiting is not None:
            self._waiting.cancel()
            self._waiting = None

    def cancel_all(self) -> None:
        """Cancel every submission, including calls already running."""
        self.cancel_pending()
        for task in list(self._tasks):
            task.cancel()

    @property
    def has_pending(self) -> bool:
        return self._waiting is not None
