from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Literal

from pydantic import BaseModel, Field

# chess.com result codes, as reported on the side they describe.
WIN_CODES = frozenset({"win"})
DRAW_CODES = frozenset(
    {
        "repetition",
        "agreed",
        "stalemate",
        "insufficient",
        "50move",
        "timevsinsufficient",
    }
)
LOSS_CODES = frozenset({"checkmated", "timeout", "resigned", "lose", "abandoned"})

Outcome = Literal["win", "draw", "loss"]


class PlayerRecord(BaseModel):
    wins: int = 0
    draws: int = 0
    losses: int = 0


class HeadToHeadTally(BaseModel):
    players: dict[str, PlayerRecord] = Field(default_factory=dict)
    total_games: int = 0

    def record(self, username: str) -> PlayerRecord:
        return self.players[username]

    def as_results(self) -> dict[str, Any]:
        """``{<user_a>: {...}, <user_b>: {...}, "totalGames": n}``, the shape the API returns."""
        out: dict[str, Any] = {u: r.model_dump() for u, r in self.players.items()}
        out["totalGames"] = self.total_games
        return out


def _side_username(game: dict[str, Any], side: str) -> str:
    player = game.get(side)
    if not isinstance(player, dict):
        return ""
    return str(player.get("username") or "").lower()


def extract_matchups(
    games: Iterable[dict[str, Any]], user_a: str, user_b: str
) -> list[dict[str, Any]]:
    """Keep the games where ``user_a`` and ``user_b`` played each other, either colour.

    Usernames are compared case-insensitively. Input order is kept.
    """
    a = user_a.lower()
    b = user_b.lower()

    out: list[dict[str, Any]] = []
    for g in games:
        white = _side_username(g, "white")
        black = _side_username(g, "black")
        if not white or not black:
            continue
        if (white == a and black == b) or (white == b and black == a):
            out.append(g)
    return out


def classify_result(code: str | None) -> Outcome | None:
    """Bucket a result code; codes outside the three known sets return None."""
    if code in WIN_CODES:
        return "win"
    if code in DRAW_CODES:
        return "draw"
    if code in LOSS_CODES:
        return "loss"
    return None


def aggregate(games: Sequence[dict[str, Any]], user_a: str, user_b: str) -> HeadToHeadTally:
    """Fold a list of matchups into a win/draw/loss tally for both players.

    Only ``white.result`` is read: chess.com records it from white's point of
    view, which is enough to score both sides. Games with an unknown code
    count toward ``total_games`` but no bucket.

    Every game must be between ``user_a`` and ``user_b``; anything else
    raises ``ValueError``.
    """
    tally = HeadToHeadTally(
        players={user_a: PlayerRecord(), user_b: PlayerRecord()},
        total_games=len(games),
    )
    a = user_a.lower()
    b = user_b.lower()

    for g in games:
        white = _side_username(g, "white")
        black = _side_username(g, "black")
        if white == a and black == b:
            white_rec, black_rec = tally.players[user_a], tally.players[user_b]
        elif white == b and black == a:
            white_rec, black_rec = tally.players[user_b], tally.players[user_a]
        else:
            raise ValueError(f"game {white!r} vs {black!r} is not between {user_a!r} and {user_b!r}")

        outcome = classify_result((g.get("white") or {}).get("result"))
        if outcome == "win":
            white_rec.wins += 1
            black_rec.losses += 1
        elif outcome == "draw":
            white_rec.draws += 1
            black_rec.draws += 1
        elif outcome == "loss":
            white_rec.losses += 1
            black_rec.wins += 1

    return tally
