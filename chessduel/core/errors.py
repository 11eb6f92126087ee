from __future__ import annotations


class ChessDuelError(RuntimeError):
    """Base class for failures surfaced by the comparison pipeline."""


class UpstreamError(ChessDuelError):
    """Fetching from the data provider failed (unreachable, bad status, bad body)."""


class MalformedLocatorError(ChessDuelError, ValueError):
    """An archive locator has no trailing year/month segments."""
