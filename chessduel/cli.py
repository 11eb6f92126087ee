import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .core import compare
from .core.chesscom import ChessComClient
from .core.errors import ChessDuelError
from .core.settings import archive_concurrency, log_level


def _add_pair(p: argparse.ArgumentParser) -> None:
    p.add_argument("user1")
    p.add_argument("user2")


def _emit(payload, out: str) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if out == "-":
        print(text)
    else:
        Path(out).write_text(text + "\n", encoding="utf-8")
        print(f"[OK] wrote {out}")


def main(argv=None):
    p = argparse.ArgumentParser(prog="chessduel")
    p.add_argument("--version", action="version", version=f"chessduel {__version__}")
    p.add_argument("--base-url", default=None, help="Override the chess.com API base URL")
    p.add_argument("--out", default="-", help="Write JSON here instead of stdout ('-')")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("player", help="Show one player's profile")
    s.add_argument("user")

    _add_pair(sub.add_parser("players", help="Show two players' profiles"))

    s = sub.add_parser("archives", help="List one player's monthly archive URLs")
    s.add_argument("user")

    _add_pair(sub.add_parser("common", help="List monthly archives both players share"))

    for name, help_text in (
        ("matches", "List every game the two players played against each other"),
        ("results", "Head-to-head win/draw/loss tally"),
        ("compare", "Both profiles plus the head-to-head tally"),
    ):
        s = sub.add_parser(name, help=help_text)
        _add_pair(s)
        s.add_argument(
            "--archive-concurrency",
            type=int,
            default=None,
            help="Monthly archives fetched at once (default: CHESSDUEL_ARCHIVE_CONCURRENCY or 1)",
        )

    args = p.parse_args(argv)

    logging.basicConfig(level=log_level(), format="%(levelname)s %(name)s: %(message)s")

    client = ChessComClient(args.base_url)

    conc = getattr(args, "archive_concurrency", None)
    if conc is not None:
        clamped = max(1, min(int(conc), 8))
        if clamped != conc:
            print(f"[WARN] --archive-concurrency clamped to {clamped}", file=sys.stderr)
        conc = clamped
    else:
        conc = archive_concurrency()

    try:
        if args.cmd == "player":
            payload = compare.get_player(args.user, client=client).model_dump()
        elif args.cmd == "players":
            payload = compare.get_players(args.user1, args.user2, client=client).model_dump()
        elif args.cmd == "archives":
            payload = compare.get_archives(args.user, client=client)
        elif args.cmd == "common":
            payload = compare.get_archive_intersection(args.user1, args.user2, client=client)
        elif args.cmd == "matches":
            payload = compare.get_matches(
                args.user1, args.user2, client=client, archive_concurrency=conc
            )
        elif args.cmd == "results":
            payload = compare.get_head_to_head(
                args.user1, args.user2, client=client, archive_concurrency=conc
            ).as_results()
        else:
            cmp = compare.get_comparison(
                args.user1, args.user2, client=client, archive_concurrency=conc
            )
            payload = {"players": cmp.players.model_dump(), "results": cmp.results.as_results()}
    except ChessDuelError as e:
        print(f"[ERR] {e}", file=sys.stderr)
        raise SystemExit(1)

    _emit(payload, args.out)


if __name__ == "__main__":
    main()
