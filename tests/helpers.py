"""Builders and an in-memory client shared by the test modules."""

from __future__ import annotations

import threading

from chessduel.core.chesscom import PlayerProfile
from chessduel.core.errors import UpstreamError

BASE = "https://api.chess.com/pub/player"


def archive_url(user: str, year: int, month: int) -> str:
    return f"{BASE}/{user}/games/{year}/{month:02d}"


def game(white: str, black: str, white_result: str, black_result: str = "") -> dict:
    return {
        "url": f"https://www.chess.com/game/live/{white}-{black}",
        "white": {"username": white, "result": white_result},
        "black": {"username": black, "result": black_result},
    }


class FakeClient:
    """In-memory stand-in for ChessComClient.

    ``archives`` maps lower-cased username -> archive URLs; ``games`` maps
    archive URL -> game list. Anything listed in ``fail`` raises UpstreamError.
    """

    def __init__(self, *, profiles=None, archives=None, games=None, fail=()):
        self.profiles = profiles or {}
        self.archives = archives or {}
        self.games = games or {}
        self.fail = set(fail)
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _log(self, kind: str, arg: str) -> None:
        with self._lock:
            self.calls.append((kind, arg))
        if arg in self.fail:
            raise UpstreamError(f"fake failure for {arg}")

    def fetch_profile(self, username: str) -> PlayerProfile:
        self._log("profile", username)
        key = username.lower()
        if key not in self.profiles:
            raise UpstreamError(f"unknown player {username}")
        return self.profiles[key]

    def fetch_archive_index(self, username: str) -> list[str]:
        self._log("archives", username)
        key = username.lower()
        if key not in self.archives:
            raise UpstreamError(f"unknown player {username}")
        return list(self.archives[key])

    def fetch_games(self, locator: str) -> list[dict]:
        self._log("games", locator)
        if locator not in self.games:
            raise UpstreamError(f"no archive at {locator}")
        return list(self.games[locator])
