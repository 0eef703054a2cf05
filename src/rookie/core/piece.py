"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from rookie.core.enums import Color, PieceType

# FEN character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_FEN_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}

# High three bits of the binary square code; the low bit is the color.
_TYPE_CODES: dict[PieceType, int] = {
    PieceType.PAWN: 0b001,
    PieceType.ROOK: 0b010,
    PieceType.KNIGHT: 0b011,
    PieceType.BISHOP: 0b100,
    PieceType.KING: 0b101,
    PieceType.QUEEN: 0b110,
}
_CODE_TYPES: dict[int, PieceType] = {v: k for k, v in _TYPE_CODES.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype)

    @property
    def nibble(self) -> int:
        """4-bit square code: piece type in the high bits, color in the low bit.

        ``0`` is reserved for an empty square and never produced here.
        """
        return (_TYPE_CODES[self.piece_type] << 1) | int(self.color)

    @classmethod
    def from_nibble(cls, code: int) -> Piece:
        """Inverse of :attr:`nibble`."""
        try:
            ptype = _CODE_TYPES[(code >> 1) & 0b111]
        except KeyError:
            raise ValueError(f"Invalid piece code: {code:#06b}") from None
        return cls(Color(code & 1), ptype)
