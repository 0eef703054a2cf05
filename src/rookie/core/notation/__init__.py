"""Notation package: FEN parsing and serialization."""

from rookie.core.notation.fen import STARTING_FEN, game_from_fen, game_to_fen

__all__ = [
    "STARTING_FEN",
    "game_from_fen",
    "game_to_fen",
]
