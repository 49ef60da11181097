"""API tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from watchlog_server.api.deps import get_oidc_client, get_tmdb_client
from watchlog_server.auth.oidc import OIDCClient
from watchlog_server.auth.session import get_codec
from watchlog_server.core.config import settings
from watchlog_server.main import app, season_checker
from watchlog_server.models.user import SessionData

from conftest import CLIENT_ID, DISCOVERY, ISSUER


@pytest.fixture
def client():
    """Create a test client with the application lifespan running."""
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def tmdb_routes(make_tmdb_client):
    """Serve TMDB requests from canned responses."""
    routes = {
        "/3/search/multi": {
            "results": [
                {"id": 27205, "media_type": "movie", "title": "Inception", "release_date": "2010-07-15"},
                {"id": 66276, "media_type": "tv", "name": "Incognito", "first_air_date": "2016-03-01"},
            ]
        },
        "/3/tv/900": {"id": 900, "name": "Tracked Show", "number_of_seasons": 2},
    }
    tmdb_client = make_tmdb_client(routes)
    app.dependency_overrides[get_tmdb_client] = lambda: tmdb_client
    return routes, tmdb_client


def create_entry(client, **fields):
    payload = {"title": "Inception", "watch_date": "2026-01-10", "kind": "movie", "rating": 5}
    payload.update(fields)
    response = client.post("/api/entries", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Watchlog Server"
    assert "version" in data


def test_health(client):
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["tmdb_configured"] is False
    assert data["auth_enabled"] is False


def test_create_entry_omits_unset_fields(client):
    """Unset optional fields are absent from the stored entry."""
    data = create_entry(client, title="  Arrival  ")

    assert data["title"] == "Arrival"
    assert data["kind"] == "movie"
    assert data["rating"] == 5
    assert data["watch_again"] is False
    assert "platform" not in data
    assert "notes" not in data
    assert "season" not in data
    assert "id" in data


def test_create_entry_requires_title_and_date(client):
    """Missing required fields are rejected before anything is stored."""
    response = client.post("/api/entries", json={"title": "   ", "watch_date": "2026-01-10"})

    assert response.status_code == 422
    assert response.json() == {
        "detail": "Please fill in all required fields",
        "error": "EntryValidationError",
    }

    response = client.post("/api/entries", json={"title": "Heat", "watch_date": ""})
    assert response.status_code == 422


def test_create_entry_rejects_bad_date(client):
    response = client.post("/api/entries", json={"title": "Heat", "watch_date": "10/01/2026"})

    assert response.status_code == 422
    assert response.json()["error"] == "EntryValidationError"


def test_create_entry_rejects_out_of_range_rating(client):
    response = client.post(
        "/api/entries", json={"title": "Heat", "watch_date": "2026-01-10", "rating": 6}
    )

    assert response.status_code == 422


def test_entry_crud(client):
    created = create_entry(
        client,
        title="Dark",
        kind="series",
        platform="Netflix",
        status="watching",
        season=1,
        genres=["Drama"],
    )
    entry_id = created["id"]

    response = client.get(f"/api/entries/{entry_id}")
    assert response.status_code == 200
    assert response.json()["genres"] == ["Drama"]

    response = client.put(
        f"/api/entries/{entry_id}",
        json={"title": "Dark", "watch_date": "2026-02-01", "kind": "series", "rating": 4},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["watch_date"] == "2026-02-01"
    assert "platform" not in updated
    assert "genres" not in updated

    response = client.delete(f"/api/entries/{entry_id}")
    assert response.status_code == 200

    response = client.get(f"/api/entries/{entry_id}")
    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


def test_update_missing_entry(client):
    response = client.put(
        "/api/entries/does-not-exist", json={"title": "Heat", "watch_date": "2026-01-10"}
    )

    assert response.status_code == 404


def test_list_entries_filters_and_sorts(client):
    create_entry(client, title="Zeta Filtertest", watch_date="2026-01-01", rating=2)
    create_entry(client, title="Alpha Filtertest", watch_date="2026-03-01", rating=4)
    create_entry(client, title="Filtertest Series", watch_date="2026-02-01", kind="series")

    response = client.get("/api/entries", params={"search": "filtertest", "kind": "movie"})
    assert [e["title"] for e in response.json()] == ["Alpha Filtertest", "Zeta Filtertest"]

    response = client.get(
        "/api/entries", params={"search": "filtertest", "kind": "movie", "sort": "title_desc"}
    )
    assert [e["title"] for e in response.json()] == ["Zeta Filtertest", "Alpha Filtertest"]


def test_grouped_entries(client):
    create_entry(client, title="Groupie", kind="series", watch_date="2026-01-01", platform="Hulu")
    create_entry(client, title="groupie ", kind="series", watch_date="2026-01-02", rating=3)
    create_entry(client, title="Groupie Movie", watch_date="2026-01-03")

    response = client.get("/api/entries/grouped", params={"search": "groupie"})
    assert response.status_code == 200
    data = response.json()

    assert [m["title"] for m in data["standalone_movies"]] == ["Groupie Movie"]
    assert len(data["series_groups"]) == 1
    group = data["series_groups"][0]
    assert group["key"] == {"kind": "title", "title": "groupie"}
    assert len(group["entries"]) == 2
    assert group["platforms"] == ["Hulu"]
    assert group["max_rating"] == 5


def test_export_csv(client):
    create_entry(client, title="Exported", notes="tense, loud")

    response = client.get("/api/entries/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="watch-history-' in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0].startswith('"Name","Type","Platform"')
    assert any(line.startswith('"Exported","Movie"') and '"tense; loud"' in line for line in lines)


def test_season_seen_flags(client):
    """Setting one season leaves the others unchanged."""
    response = client.put("/api/series/500/seasons/1/seen", json={"seen": True})
    assert response.status_code == 200
    assert response.json() == {"tmdb_id": 500, "seasons": {"1": True}}

    client.put("/api/series/500/seasons/2/seen", json={"seen": True})
    client.put("/api/series/500/seasons/2/seen", json={"seen": False})

    response = client.get("/api/series/500/seasons/seen")
    assert response.json()["seasons"] == {"1": True, "2": False}


def test_toggle_season(client):
    response = client.post("/api/series/501/seasons/3/toggle")
    assert response.json()["seasons"] == {"3": True}

    response = client.post("/api/series/501/seasons/3/toggle")
    assert response.json()["seasons"] == {"3": False}


def test_episode_seen_flags(client):
    client.put("/api/series/502/seasons/1/episodes/1/seen", json={"seen": True})
    client.put("/api/series/502/seasons/1/episodes/2/seen", json={"seen": False})
    response = client.put("/api/series/502/seasons/2/episodes/1/seen", json={"seen": True})

    assert response.json() == {
        "tmdb_id": 502,
        "episodes": {"1": {"1": True, "2": False}, "2": {"1": True}},
    }
    # Episode flags do not touch season flags
    assert client.get("/api/series/502/seasons/seen").json()["seasons"] == {}


def test_metadata_without_api_key(client):
    """Metadata endpoints report missing configuration as 503."""
    response = client.get("/api/series/1/progress")
    assert response.status_code == 503
    assert response.json()["error"] == "ConfigurationError"

    response = client.get("/api/search", params={"q": "Inc"})
    assert response.status_code == 503


def test_search(client, tmdb_routes):
    response = client.get("/api/search", params={"q": "Inc"})

    assert response.status_code == 200
    assert [(r["title"], r["year"], r["type"]) for r in response.json()] == [
        ("Inception", "2010", "Movie"),
        ("Incognito", "2016", "Series"),
    ]


def test_search_websocket(client, tmdb_routes):
    with client.websocket_connect("/api/search/ws") as websocket:
        websocket.send_json({"query": "I"})
        assert websocket.receive_json() == {"query": "I", "results": []}

        websocket.send_json({"query": "Inc"})
        message = websocket.receive_json()

    assert message["query"] == "Inc"
    assert [r["title"] for r in message["results"]] == ["Inception", "Incognito"]


def test_series_details(client, tmdb_routes):
    response = client.get("/api/series/900/details")

    assert response.status_code == 200
    assert response.json()["season_count"] == 2


def test_alert_lifecycle(client, tmdb_routes, monkeypatch):
    """Track a series, detect a new season, then dismiss the alert."""
    routes, tmdb_client = tmdb_routes
    monkeypatch.setattr(season_checker, "tmdb_client", tmdb_client)
    monkeypatch.setattr(season_checker, "pending_alerts", [])
    monkeypatch.setattr(season_checker, "poll_delay_seconds", 0)

    response = client.post("/api/alerts/tracked/900", json={"series_name": "Tracked Show"})
    assert response.status_code == 200
    assert response.json()["last_known_season_count"] == 2

    assert client.post("/api/alerts/check").json() == []

    routes["/3/tv/900"] = {"id": 900, "name": "Tracked Show", "number_of_seasons": 3}
    tmdb_client._cache.clear()

    alerts = client.post("/api/alerts/check").json()
    assert [(a["tmdb_id"], a["new_season_number"]) for a in alerts] == [(900, 3)]
    assert client.get("/api/alerts").json() == alerts

    alert_id = alerts[0]["id"]
    assert client.post(f"/api/alerts/{alert_id}/dismiss").status_code == 200
    assert client.get("/api/alerts").json() == []

    client.delete("/api/alerts/dismissed")
    assert [a["id"] for a in client.get("/api/alerts").json()] == [alert_id]

    assert client.delete("/api/alerts/tracked/900").status_code == 200
    assert client.delete("/api/alerts/tracked/900").status_code == 404


def test_current_user_requires_login(client):
    response = client.get("/api/auth/user")

    assert response.status_code == 401
    assert response.json() is None


def test_callback_without_login_state_restarts_login(client):
    response = client.get("/api/callback?code=abc&state=s", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/api/login"


def test_login_redirects_to_provider(client):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=DISCOVERY))
    oidc_client = OIDCClient(ISSUER, CLIENT_ID, transport=transport)
    app.dependency_overrides[get_oidc_client] = lambda: oidc_client

    response = client.get("/api/login", follow_redirects=False)

    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith(f"{ISSUER}/auth?")
    assert "code_challenge_method=S256" in location
    assert "redirect_uri=https%3A%2F%2Ftestserver%2Fapi%2Fcallback" in location

    session = get_codec().decode(response.cookies.get(settings.session_cookie_name))
    assert session.code_verifier
    assert session.state and f"state={session.state}" in location


def test_logout_passes_id_token_hint_and_clears_session(client):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=DISCOVERY))
    oidc_client = OIDCClient(ISSUER, CLIENT_ID, transport=transport)
    app.dependency_overrides[get_oidc_client] = lambda: oidc_client
    cookie = get_codec().encode(
        SessionData(user_id="u1", id_token="header.payload.sig", is_logged_in=True)
    )
    client.cookies.set(settings.session_cookie_name, cookie)

    response = client.get("/api/logout", follow_redirects=False)

    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith(f"{ISSUER}/session/end?")
    assert "id_token_hint=header.payload.sig" in location

    session = get_codec().decode(response.cookies.get(settings.session_cookie_name))
    assert session.is_logged_in is False
    assert session.id_token is None


def test_data_endpoints_require_login_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "oidc_client_id", CLIENT_ID)

    assert client.get("/api/entries").status_code == 401
    assert client.get("/api/alerts").status_code == 401

    cookie = get_codec().encode(SessionData(user_id="u1", is_logged_in=True))
    client.cookies.set(settings.session_cookie_name, cookie)

    assert client.get("/api/entries").status_code == 200
