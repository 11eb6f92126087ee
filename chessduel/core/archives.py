"""Match monthly archives between two players.

chess.com archive URLs end in ``.../games/<year>/<month>``; two players'
archives cover the same month when those two trailing segments agree.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .errors import MalformedLocatorError


@dataclass(frozen=True)
class SharedArchive:
    period: str
    locator_a: str
    locator_b: str


def period_key(locator: str) -> str:
    """``https://api.chess.com/pub/player/x/games/2018/01`` -> ``"2018/01"``."""
    parts = str(locator).split("/")
    if len(parts) < 2 or not parts[-1] or not parts[-2]:
        raise MalformedLocatorError(f"archive locator has no year/month suffix: {locator!r}")
    return "/".join(parts[-2:])


def _index_by_period(locators: Sequence[str]) -> dict[str, str]:
    # First locator wins when a list repeats a period.
    out: dict[str, str] = {}
    for loc in locators:
        out.setdefault(period_key(loc), loc)
    return out


def intersect_archives(locators_a: Sequence[str], locators_b: Sequence[str]) -> list[str]:
    """Return the locators of ``locators_a`` whose month also appears in ``locators_b``.

    Order, values and repeats of ``locators_a`` are kept as given.
    """
    return [s.locator_a for s in pair_archives(locators_a, locators_b)]


def pair_archives(locators_a: Sequence[str], locators_b: Sequence[str]) -> list[SharedArchive]:
    """Like :func:`intersect_archives`, but keep both players' locators per month."""
    by_period_b = _index_by_period(locators_b)

    shared: list[SharedArchive] = []
    for loc in locators_a:
        key = period_key(loc)
        other = by_period_b.get(key)
        if other is not None:
            shared.append(SharedArchive(period=key, locator_a=loc, locator_b=other))
    return shared
