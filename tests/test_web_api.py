from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from chessduel.app import app, get_client


@pytest.fixture
def web(two_player_client):
    app.dependency_overrides[get_client] = lambda: two_player_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_healthz():
    r = TestClient(app).get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_player(web):
    r = web.get("/api/chess/player/alice")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "success"
    assert body["player"]["username"] == "alice"
    assert body["player"]["title"] == "No title"


def test_players(web):
    body = web.get("/api/chess/players/alice/bob").json()
    assert body["players"]["player1"]["username"] == "alice"
    assert body["players"]["player2"]["username"] == "Bob"


def test_archives(web):
    body = web.get("/api/chess/player/bob/games/archives").json()
    assert body == {
        "status": "success",
        "archives": [
            "https://api.chess.com/pub/player/bob/games/2020/02",
            "https://api.chess.com/pub/player/bob/games/2020/03",
            "https://api.chess.com/pub/player/bob/games/2020/04",
        ],
    }


def test_common_archives(web):
    body = web.get("/api/chess/players/alice/bob/games/archives").json()
    assert body["commonArchives"] == [
        "https://api.chess.com/pub/player/alice/games/2020/02",
        "https://api.chess.com/pub/player/alice/games/2020/03",
    ]


def test_matches_pass_through_raw_games(web):
    body = web.get("/api/chess/players/alice/bob/games/matches").json()
    assert len(body["matches"]) == 4
    assert body["matches"][0]["white"] == {"username": "Alice", "result": "win"}


def test_results(web):
    body = web.get("/api/chess/players/Alice/BOB/games/results").json()
    assert body == {
        "status": "success",
        "results": {
            "alice": {"wins": 2, "draws": 1, "losses": 0},
            "bob": {"wins": 0, "draws": 1, "losses": 2},
            "totalGames": 4,
        },
    }


@pytest.mark.parametrize("path", ["comparison", "comparation"])
def test_comparison(web, path):
    body = web.get(f"/api/chess/players/alice/bob/{path}").json()
    assert body["status"] == "success"
    assert body["players"]["player1"]["player_id"] == 1
    assert body["results"]["totalGames"] == 4


def test_upstream_failure_is_uniform_500(web, caplog):
    with caplog.at_level(logging.ERROR, logger="chessduel.app"):
        r = web.get("/api/chess/players/alice/nobody/games/results")
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Unable to fetch head-to-head results"}
    assert "unknown player nobody" in caplog.text


def test_failed_archive_returns_no_partial_matches(web, two_player_client):
    two_player_client.fail.add("https://api.chess.com/pub/player/alice/games/2020/03")
    r = web.get("/api/chess/players/alice/bob/games/matches")
    assert r.status_code == 500
    assert "matches" not in r.json()


def test_unknown_single_player(web):
    r = web.get("/api/chess/player/nobody")
    assert r.status_code == 500
    assert r.json()["status"] == "error"


def test_malformed_archive_entry_keeps_error_envelope(monkeypatch):
    from chessduel.core import chesscom

    base = "https://api.chess.com/pub/player"
    bodies = {
        f"{base}/a/games/archives": {"archives": [f"{base}/a/games/2020/01"]},
        f"{base}/b/games/archives": {"archives": [f"{base}/b/games/2020/01"]},
        f"{base}/a/games/2020/01": {"games": ["oops"]},
    }
    monkeypatch.setattr(chesscom, "get_json", lambda url, **kw: bodies[url])

    r = TestClient(app).get("/api/chess/players/a/b/games/matches")
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Unable to fetch matches"}
