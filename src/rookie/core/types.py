"""Square coordinates and naming helpers.

A square is a ``(file, rank)`` pair with both components in ``0..7``:
``file=0`` is the a-file and ``rank=0`` is White's back rank (row 1).
FEN's top-down rank order is handled only by the notation layer.
"""

from __future__ import annotations

from typing import NamedTuple

_FILES = "abcdefgh"
_RANKS = "12345678"


class Square(NamedTuple):
    """Board coordinate, e.g. ``Square(4, 3)`` is e4."""

    file: int
    rank: int

    @property
    def name(self) -> str:
        return square_name(self)

    def offset(self, df: int, dr: int) -> Square | None:
        """The square shifted by ``(df, dr)``, or ``None`` when off the board."""
        f = self.file + df
        r = self.rank + dr
        if 0 <= f < 8 and 0 <= r < 8:
            return Square(f, r)
        return None

    def __str__(self) -> str:
        return self.name


def is_valid_square(file: int, rank: int) -> bool:
    """Check whether ``(file, rank)`` lies on the 8x8 board."""
    return 0 <= file < 8 and 0 <= rank < 8


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. ``Square(0, 0)`` -> ``'a1'``."""
    return _FILES[sq.file] + _RANKS[sq.rank]


def parse_square(name: str) -> Square:
    """Parse square name, e.g. ``'e4'`` -> ``Square(4, 3)``."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    return Square(_FILES.index(name[0]), _RANKS.index(name[1]))


# ── Named square constants ───────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = (Square(f, 0) for f in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (Square(f, 1) for f in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (Square(f, 2) for f in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (Square(f, 3) for f in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (Square(f, 4) for f in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (Square(f, 5) for f in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (Square(f, 6) for f in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = (Square(f, 7) for f in range(8))
