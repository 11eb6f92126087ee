"""Shared settings / defaults for ChessDuel.

Everything is read from environment variables at call time so tests (and
long-running servers) pick up changes without a restart.
"""

from __future__ import annotations

import logging
import os

DEFAULT_API_BASE = "https://api.chess.com/pub"


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    try:
        v = int(os.environ.get(name, str(default)))
    except ValueError:
        v = default
    return max(lo, min(v, hi))


def _env_float(name: str, default: float, *, lo: float, hi: float) -> float:
    try:
        v = float(os.environ.get(name, str(default)))
    except ValueError:
        v = default
    return max(lo, min(v, hi))


def api_base() -> str:
    return os.environ.get("CHESSDUEL_API_BASE", DEFAULT_API_BASE).rstrip("/")


def http_timeout() -> float:
    return _env_float("CHESSDUEL_HTTP_TIMEOUT", 30.0, lo=1.0, hi=120.0)


def http_max_retries() -> int:
    return _env_int("CHESSDUEL_HTTP_MAX_RETRIES", 3, lo=0, hi=10)


def archive_concurrency() -> int:
    """How many monthly archives may be fetched at once (1 = one at a time)."""
    return _env_int("CHESSDUEL_ARCHIVE_CONCURRENCY", 1, lo=1, hi=8)


def cors_origins() -> list[str]:
    raw = os.environ.get("CHESSDUEL_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def log_level() -> str:
    name = os.environ.get("CHESSDUEL_LOG_LEVEL", "INFO").strip().upper()
    # getLevelName maps a known name to its number and anything else to a string.
    if not isinstance(logging.getLevelName(name), int):
        return "INFO"
    return name
