"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from rookie.core.enums import Color, PieceType
from rookie.core.errors import OutOfBoundsError
from rookie.core.piece import Piece
from rookie.core.types import Square, is_valid_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _index(file: int, rank: int) -> int:
    if not is_valid_square(file, rank):
        raise OutOfBoundsError(f"Square ({file}, {rank}) is off the board")
    return rank * 8 + file


class Board:
    """Mutable 8x8 grid of optional pieces.

    The board knows nothing about legality: two white kings or a pawn on the
    back rank are representable. Legality lives in the move generator and
    :class:`~rookie.core.game.Game`.
    """

    __slots__ = ("_squares",)

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64

    # ── Primitive operations ─────────────────────────────────────────────────

    def place(self, piece: Piece, file: int, rank: int) -> None:
        """Put *piece* on ``(file, rank)``, overwriting any prior occupant."""
        self._squares[_index(file, rank)] = piece

    def remove(self, file: int, rank: int) -> Piece | None:
        """Take the piece off ``(file, rank)`` and return it."""
        idx = _index(file, rank)
        piece = self._squares[idx]
        self._squares[idx] = None
        return piece

    def piece_at(self, file: int, rank: int) -> Piece | None:
        return self._squares[_index(file, rank)]

    # ── Square-keyed sugar ───────────────────────────────────────────────────

    def __getitem__(self, sq: Square) -> Piece | None:
        return self.piece_at(sq.file, sq.rank)

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        if piece is None:
            self.remove(sq.file, sq.rank)
        else:
            self.place(piece, sq.file, sq.rank)

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    # ── Query helpers ────────────────────────────────────────────────────────

    def pieces(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for occupied squares, a1 first.

        When *color* is given only that side's pieces are produced.
        """
        for idx, piece in enumerate(self._squares):
            if piece is None:
                continue
            if color is not None and piece.color != color:
                continue
            yield Square(idx & 7, idx >> 3), piece

    def king_square(self, color: Color) -> Square | None:
        """Square of *color*'s king, or ``None`` if it has none."""
        try:
            idx = self._squares.index(Piece(color, PieceType.KING))
        except ValueError:
            return None
        return Square(idx & 7, idx >> 3)

    # ── Mutation / copying ───────────────────────────────────────────────────

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * 64

    # ── Factory ──────────────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b.place(Piece(Color.WHITE, pt), f, 0)
            b.place(Piece(Color.WHITE, PieceType.PAWN), f, 1)
            b.place(Piece(Color.BLACK, PieceType.PAWN), f, 6)
            b.place(Piece(Color.BLACK, pt), f, 7)
        return b

    # ── Dunder helpers ───────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self.piece_at(file, rank)
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
