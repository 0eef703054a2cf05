"""Move value objects.

Every move shape records enough to reverse itself: captured pieces travel by
value inside the move, so :meth:`undo` needs neither history nor game state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from rookie.core.board import Board
from rookie.core.enums import PieceType
from rookie.core.errors import InvalidMoveError
from rookie.core.piece import Piece
from rookie.core.types import Square


def _take(board: Board, sq: Square, what: str) -> Piece:
    piece = board.remove(sq.file, sq.rank)
    if piece is None:
        raise InvalidMoveError(f"No {what} on {sq.name}")
    return piece


@dataclass(frozen=True, slots=True)
class NormalMove:
    """Ordinary move, optionally capturing and optionally promoting."""

    from_sq: Square
    to_sq: Square
    piece: Piece
    captured: Piece | None = None
    promotion: PieceType | None = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_double_push(self) -> bool:
        """Two-square pawn advance (the move that enables en passant)."""
        return (
            self.piece.piece_type == PieceType.PAWN
            and self.from_sq.file == self.to_sq.file
            and abs(self.to_sq.rank - self.from_sq.rank) == 2
        )

    @property
    def placed_piece(self) -> Piece:
        """The piece standing on :attr:`to_sq` after the move."""
        if self.promotion is None:
            return self.piece
        return Piece(self.piece.color, self.promotion)

    def apply(self, board: Board) -> None:
        _take(board, self.from_sq, "piece to move")
        board[self.to_sq] = self.placed_piece

    def undo(self, board: Board) -> None:
        board[self.to_sq] = self.captured
        board[self.from_sq] = self.piece

    def __str__(self) -> str:
        text = f"{self.piece.piece_type.label} at {self.from_sq}"
        if self.captured is not None:
            text += f" takes {self.captured.piece_type.label} at {self.to_sq}"
        else:
            text += f" moves to {self.to_sq}"
        if self.promotion is not None:
            text += f" and promotes to {self.promotion.label}"
        return text


@dataclass(frozen=True, slots=True)
class EnPassantMove:
    """Pawn capture of a pawn that just advanced two squares past it."""

    from_sq: Square
    to_sq: Square
    pawn: Piece
    captured_pawn: Piece
    captured_square: Square

    @property
    def is_capture(self) -> bool:
        return True

    def apply(self, board: Board) -> None:
        if board.is_empty(self.captured_square):
            raise InvalidMoveError(
                f"No pawn to capture en passant on {self.captured_square.name}"
            )
        _take(board, self.from_sq, "pawn to move")
        board[self.captured_square] = None
        board[self.to_sq] = self.pawn

    def undo(self, board: Board) -> None:
        board[self.to_sq] = None
        board[self.from_sq] = self.pawn
        board[self.captured_square] = self.captured_pawn

    def __str__(self) -> str:
        return (
            f"Pawn at {self.from_sq} takes Pawn at {self.captured_square} "
            f"en passant, landing on {self.to_sq}"
        )


@dataclass(frozen=True, slots=True)
class CastleMove:
    """King and rook composite move; the king travels two files."""

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @property
    def from_sq(self) -> Square:
        return self.king_from

    @property
    def to_sq(self) -> Square:
        return self.king_to

    @property
    def is_capture(self) -> bool:
        return False

    @property
    def is_kingside(self) -> bool:
        return self.king_to.file > self.king_from.file

    def apply(self, board: Board) -> None:
        self._shift(board, self.king_from, self.king_to, self.rook_from, self.rook_to)

    def undo(self, board: Board) -> None:
        self._shift(board, self.king_to, self.king_from, self.rook_to, self.rook_from)

    @staticmethod
    def _shift(
        board: Board,
        king_src: Square,
        king_dst: Square,
        rook_src: Square,
        rook_dst: Square,
    ) -> None:
        king = _take(board, king_src, "king to castle")
        rook = board.remove(rook_src.file, rook_src.rank)
        if rook is None:
            board[king_src] = king
            raise InvalidMoveError(f"No rook to castle with on {rook_src.name}")
        board[king_dst] = king
        board[rook_dst] = rook

    def __str__(self) -> str:
        side = "kingside" if self.is_kingside else "queenside"
        return f"King castles {side} from {self.king_from} to {self.king_to}"


Move: TypeAlias = NormalMove | EnPassantMove | CastleMove
