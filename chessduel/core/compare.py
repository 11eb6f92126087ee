"""Compose the gateway, archive matching and tally into the public operations.

Profile and archive-index fetches for the two players run on a small thread
pool. Monthly archives are then read one at a time (or through a bounded pool
when ``archive_concurrency`` > 1) and their matchups concatenated in archive
order. Any fetch failure propagates and aborts the whole call.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pydantic import BaseModel

from . import settings
from .archives import intersect_archives
from .chesscom import ChessComClient, PlayerProfile
from .headtohead import HeadToHeadTally, aggregate, extract_matchups


class PlayerPair(BaseModel):
    player1: PlayerProfile
    player2: PlayerProfile


class Comparison(BaseModel):
    players: PlayerPair
    results: HeadToHeadTally


def _run_concurrently(*calls: tuple[Callable[..., Any], Any]) -> list[Any]:
    """Run independent one-argument calls in parallel; return results in call order."""
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(fn, arg) for fn, arg in calls]
        # .result() re-raises the first failure in call order.
        return [f.result() for f in futures]


def _client(client: ChessComClient | None) -> ChessComClient:
    return client if client is not None else ChessComClient()


def _collect_matchups(
    client: ChessComClient,
    archives: Sequence[str],
    user_a: str,
    user_b: str,
    *,
    concurrency: int,
) -> list[dict[str, Any]]:
    def _one(locator: str) -> list[dict[str, Any]]:
        return extract_matchups(client.fetch_games(locator), user_a, user_b)

    matches: list[dict[str, Any]] = []
    if concurrency <= 1 or len(archives) <= 1:
        for locator in archives:
            matches.extend(_one(locator))
        return matches

    with ThreadPoolExecutor(max_workers=min(concurrency, len(archives))) as pool:
        # map() yields in submission order and raises on the first failed archive.
        for chunk in pool.map(_one, archives):
            matches.extend(chunk)
    return matches


def get_player(username: str, *, client: ChessComClient | None = None) -> PlayerProfile:
    return _client(client).fetch_profile(username)


def get_players(
    user_a: str, user_b: str, *, client: ChessComClient | None = None
) -> PlayerPair:
    c = _client(client)
    p1, p2 = _run_concurrently((c.fetch_profile, user_a), (c.fetch_profile, user_b))
    return PlayerPair(player1=p1, player2=p2)


def get_archives(username: str, *, client: ChessComClient | None = None) -> list[str]:
    return _client(client).fetch_archive_index(username)


def _shared_archives(c: ChessComClient, user_a: str, user_b: str) -> list[str]:
    idx_a, idx_b = _run_concurrently(
        (c.fetch_archive_index, user_a),
        (c.fetch_archive_index, user_b),
    )
    return intersect_archives(idx_a, idx_b)


def get_archive_intersection(
    user_a: str, user_b: str, *, client: ChessComClient | None = None
) -> list[str]:
    """Archive URLs (from ``user_a``'s list) for months both players have games in."""
    return _shared_archives(_client(client), user_a, user_b)


def get_matches(
    user_a: str,
    user_b: str,
    *,
    client: ChessComClient | None = None,
    archive_concurrency: int | None = None,
) -> list[dict[str, Any]]:
    """Every game the two players played against each other, as raw provider JSON."""
    c = _client(client)
    if archive_concurrency is None:
        archive_concurrency = settings.archive_concurrency()
    shared = _shared_archives(c, user_a, user_b)
    return _collect_matchups(
        c, shared, user_a.lower(), user_b.lower(), concurrency=archive_concurrency
    )


def get_head_to_head(
    user_a: str,
    user_b: str,
    *,
    client: ChessComClient | None = None,
    archive_concurrency: int | None = None,
) -> HeadToHeadTally:
    """Win/draw/loss tally keyed by the lower-cased usernames."""
    a, b = user_a.lower(), user_b.lower()
    matches = get_matches(a, b, client=client, archive_concurrency=archive_concurrency)
    return aggregate(matches, a, b)


def get_comparison(
    user_a: str,
    user_b: str,
    *,
    client: ChessComClient | None = None,
    archive_concurrency: int | None = None,
) -> Comparison:
    """Both profiles plus the head-to-head tally."""
    c = _client(client)
    if archive_concurrency is None:
        archive_concurrency = settings.archive_concurrency()
    a, b = user_a.lower(), user_b.lower()

    p1, p2, idx_a, idx_b = _run_concurrently(
        (c.fetch_profile, user_a),
        (c.fetch_profile, user_b),
        (c.fetch_archive_index, user_a),
        (c.fetch_archive_index, user_b),
    )
    shared = intersect_archives(idx_a, idx_b)
    matches = _collect_matchups(c, shared, a, b, concurrency=archive_concurrency)

    return Comparison(
        players=PlayerPair(player1=p1, player2=p2),
        results=aggregate(matches, a, b),
    )
