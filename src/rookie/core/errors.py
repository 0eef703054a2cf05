"""Exception hierarchy for the rules engine."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by :mod:`rookie.core`."""


class FenError(ChessError, ValueError):
    """Raised when a FEN string is malformed; no partial game is produced."""


class OutOfBoundsError(ChessError, IndexError):
    """Raised when board coordinates fall outside the 8x8 grid."""


class InvalidMoveError(ChessError, ValueError):
    """Raised when a move cannot be applied to the board it was given."""
