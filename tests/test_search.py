"""Tests for debounced search-as-you-type."""

import asyncio

from watchlog_server.core.errors import NetworkError
from watchlog_server.models.metadata import SearchResult
from watchlog_server.services.debounce import Debouncer
from watchlog_server.services.search_session import SearchSession


class FakeSearch:
    def __init__(self, fail: bool = False, delay: float = 0):
        self.queries: list[str] = []
        self.fail = fail
        self.delay = delay

    async def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise NetworkError("TMDB API error: 500 - boom")
        return [SearchResult(id=1, title=query.title(), year="2010", type="Movie", media_type="movie")]


async def test_debouncer_runs_only_last_call():
    debouncer = Debouncer(0.01)
    calls = []

    async def record(value):
        calls.append(value)

    first = debouncer.submit(lambda: record("a"))
    second = debouncer.submit(lambda: record("ab"))
    await second

    assert first.cancelled()
    assert calls == ["ab"]
    assert debouncer.has_pending is False


async def test_debouncer_does_not_cancel_started_call():
    debouncer = Debouncer(0)
    started = asyncio.Event()
    release = asyncio.Event()
    calls = []

    async def slow():
        started.set()
        await release.wait()
        calls.append("slow")

    async def fast():
        calls.append("fast")

    first = debouncer.submit(slow)
    await started.wait()
    second = debouncer.submit(fast)
    await second
    release.set()
    await first

    assert calls == ["fast", "slow"]


async def test_typing_burst_sends_one_search():
    sent = []

    async def send(message):
        sent.append(message)

    metadata = FakeSearch()
    session = SearchSession(metadata, send, debounce_seconds=0.01)

    for query in ["in", "inc", "ince"]:
        await session.on_query(query)
    await asyncio.sleep(0.05)

    assert metadata.queries == ["ince"]
    assert sent == [
        {
            "query": "ince",
            "results": [
                {
                    "id": 1,
                    "title": "Ince",
                    "year": "2010",
                    "type": "Movie",
                    "poster_url": None,
                    "media_type": "movie",
                }
            ],
        }
    ]


async def test_short_query_clears_results_immediately():
    sent = []

    async def send(message):
        sent.append(message)

    metadata = FakeSearch()
    session = SearchSession(metadata, send, debounce_seconds=0.01)

    await session.on_query("inc")
    await session.on_query("i")
    await asyncio.sleep(0.05)

    assert metadata.queries == []
    assert sent == [{"query": "i", "results": []}]
    assert session.results == []


async def test_search_error_is_reported():
    sent = []

    async def send(message):
        sent.append(message)

    session = SearchSession(FakeSearch(fail=True), send, debounce_seconds=0)

    await session.on_query("inc")
    await asyncio.sleep(0.02)

    assert sent == [{"query": "inc", "error": "TMDB API error: 500 - boom"}]


async def test_close_cancels_running_search():
    loop = asyncio.get_running_loop()
    loop_errors = []
    loop.set_exception_handler(lambda _loop, context: loop_errors.append(context["message"]))
    socket_open = True
    sent = []

    async def send(message):
        if not socket_open:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        sent.append(message)

    metadata = FakeSearch(delay=0.05)
    session = SearchSession(metadata, send, debounce_seconds=0.01)

    await session.on_query("inception")
    await asyncio.sleep(0.02)
    socket_open = False
    session.close()
    await asyncio.sleep(0.06)

    assert metadata.queries == ["inception"]
    assert sent == []
    assert loop_errors == []


async def test_send_failure_is_dropped():
    async def send(message):
        raise RuntimeError("WebSocket is not connected.")

    session = SearchSession(FakeSearch(), send, debounce_seconds=0)
    await session.on_query("inc")
    task = next(iter(session._debouncer._tasks))
    await task

    assert task.exception() is None
    assert session.results[0].title == "Inc"


async def test_debouncer_logs_failed_call(caplog):
    debouncer = Debouncer(0)

    async def boom():
        raise ValueError("bad")

    task = debouncer.submit(boom)
    await asyncio.sleep(0.01)

    assert task.done()
    assert "Debounced call failed" in caplog.text
    assert debouncer._tasks == set()
