"""Shared test fixtures.

The database and device-local state point at a temporary directory before
the application is imported, since settings are read at import time.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="watchlog-tests-")
os.environ["WATCHLOG_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/watchlog.db"
os.environ["WATCHLOG_STATE_DIR"] = os.path.join(_TMP_DIR, "state")
os.environ["WATCHLOG_CHECK_SEASONS_ON_STARTUP"] = "false"
os.environ.pop("WATCHLOG_TMDB_API_KEY", None)
os.environ.pop("WATCHLOG_OIDC_CLIENT_ID", None)

import httpx  # noqa: E402
import pytest  # noqa: E402

from watchlog_server.services.cache import TTLCache  # noqa: E402
from watchlog_server.services.tmdb_client import TMDBClient  # noqa: E402

ISSUER = "https://issuer.example"
CLIENT_ID = "watchlog-client"

DISCOVERY = {
    "issuer": ISSUER,
    "authorization_endpoint": f"{ISSUER}/auth",
    "token_endpoint": f"{ISSUER}/token",
    "jwks_uri": f"{ISSUER}/jwks",
    "end_session_endpoint": f"{ISSUER}/session/end",
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


def tmdb_fixture_handler(routes: dict, calls: list):
    """Build a MockTransport handler serving JSON by request path.

    Args:
        routes: Mapping of URL path (e.g. "/3/tv/1") to JSON body or
            (status, body) tuple
        calls: List receiving each requested path
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        calls.append(path)
        if path not in routes:
            return httpx.Response(404, json={"status_message": "not found"})
        route = routes[path]
        if isinstance(route, tuple):
            status, body = route
            return httpx.Response(status, json=body)
        return httpx.Response(200, json=route)

    return handler


@pytest.fixture
def make_tmdb_client(fake_clock):
    """Factory for a TMDB client backed by canned responses."""

    def factory(routes: dict, calls: list | None = None, api_key: str | None = "test-key"):
        calls = calls if calls is not None else []
        transport = httpx.MockTransport(tmdb_fixture_handler(routes, calls))
        return TMDBClient(
            api_key,
            client=httpx.AsyncClient(transport=transport),
            cache=TTLCache(300.0, clock=fake_clock),
        )

    return factory
