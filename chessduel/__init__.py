"""ChessDuel: head-to-head statistics for chess.com players."""

__version__ = "0.1.0"
