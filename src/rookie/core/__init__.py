"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from rookie.core import Game, STARTING_FEN

    game = Game.from_fen(STARTING_FEN)
    for move in game.legal_moves():
        print(move)
    game.apply(game.find_move("e2", "e4"))
    print(game.status())
"""

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, DrawReason, PieceType
from rookie.core.errors import ChessError, FenError, InvalidMoveError, OutOfBoundsError
from rookie.core.game import Game
from rookie.core.hashing import encode_board, position_hash
from rookie.core.move import CastleMove, EnPassantMove, Move, NormalMove
from rookie.core.move_generator import MoveGenerator
from rookie.core.notation import STARTING_FEN, game_from_fen, game_to_fen
from rookie.core.piece import Piece
from rookie.core.rules import Rules
from rookie.core.status import (
    Check,
    Checkmate,
    DrawByClaim,
    GameStatus,
    InProgress,
    Stalemate,
)
from rookie.core.types import Square, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "PieceType",
    # Types / helpers
    "Square",
    "parse_square",
    "square_name",
    # Errors
    "ChessError",
    "FenError",
    "InvalidMoveError",
    "OutOfBoundsError",
    # Domain objects
    "Board",
    "CastleMove",
    "EnPassantMove",
    "Game",
    "Move",
    "MoveGenerator",
    "NormalMove",
    "Piece",
    "Rules",
    # Status
    "Check",
    "Checkmate",
    "DrawByClaim",
    "GameStatus",
    "InProgress",
    "Stalemate",
    # Hashing
    "encode_board",
    "position_hash",
    # Notation
    "STARTING_FEN",
    "game_from_fen",
    "game_to_fen",
]
