import os
import sys

import pytest

# Let test modules import helpers.py directly.
sys.path.insert(0, os.path.dirname(__file__))

from helpers import FakeClient, archive_url, game  # noqa: E402
from chessduel.core.chesscom import PlayerProfile  # noqa: E402


@pytest.fixture
def two_player_client() -> FakeClient:
    """alice and bob share 2020/02 and 2020/03; alice also played carol."""
    a1, a2, a3 = (archive_url("alice", 2020, m) for m in (1, 2, 3))
    b2, b3, b4 = (archive_url("bob", 2020, m) for m in (2, 3, 4))
    return FakeClient(
        profiles={
            "alice": PlayerProfile(username="alice", player_id=1, followers=3),
            "bob": PlayerProfile(username="Bob", player_id=2),
        },
        archives={"alice": [a1, a2, a3], "bob": [b2, b3, b4]},
        games={
            a1: [game("alice", "carol", "win", "resigned")],
            a2: [
                game("Alice", "bob", "win", "checkmated"),
                game("alice", "carol", "agreed", "agreed"),
                game("BOB", "alice", "stalemate", "stalemate"),
            ],
            a3: [
                game("bob", "alice", "resigned", "win"),
                game("alice", "bob", "threefoldrepetition", "threefoldrepetition"),
            ],
        },
    )
