"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, PieceType
from rookie.core.move import CastleMove, EnPassantMove, Move, NormalMove
from rookie.core.piece import Piece
from rookie.core.types import Square

if TYPE_CHECKING:
    from rookie.core.game import Game


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_ALL_SQUARES: tuple[Square, ...] = tuple(Square(i & 7, i >> 3) for i in range(64))


# ── Precomputed lookup tables ────────────────────────────────────────────────


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for sq in _ALL_SQUARES:
        moves: list[Square] = []
        for df, dr in offsets:
            to_sq = sq.offset(df, dr)
            if to_sq is not None:
                moves.append(to_sq)
        targets[sq] = tuple(moves)
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[tuple[Square, ...], ...]]:
    rays_per_square: dict[Square, tuple[tuple[Square, ...], ...]] = {}
    for sq in _ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            ray: list[Square] = []
            to_sq = sq.offset(df, dr)
            while to_sq is not None:
                ray.append(to_sq)
                to_sq = to_sq.offset(df, dr)
            square_rays.append(tuple(ray))
        rays_per_square[sq] = tuple(square_rays)
    return rays_per_square


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}
_LEAPER_TARGETS = {
    PieceType.KNIGHT: _KNIGHT_TARGETS,
    PieceType.KING: _KING_TARGETS,
}


def pawn_direction(color: Color) -> int:
    """Rank step of a pawn of *color*: +1 for White, -1 for Black."""
    return 1 if color == Color.WHITE else -1


def promotion_rank(color: Color) -> int:
    return 7 if color == Color.WHITE else 0


def pawn_start_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else 6


def back_rank(color: Color) -> int:
    return 0 if color == Color.WHITE else 7


# ── Pseudo-legal generation ──────────────────────────────────────────────────


def piece_moves(board: Board, sq: Square, last_move: Move | None = None) -> list[Move]:
    """Geometric moves of the piece on *sq*, ignoring checks and castling.

    *last_move* is the immediately preceding half-move; it is only consulted
    to decide whether an en passant capture is available.
    """
    piece = board[sq]
    if piece is None:
        return []
    moves: list[Move] = []
    _gen_piece(board, sq, piece, last_move, moves)
    return moves


def pseudo_legal_moves(
    board: Board, color: Color, last_move: Move | None = None
) -> list[Move]:
    """All pseudo-legal moves for *color* (may leave its own king in check)."""
    moves: list[Move] = []
    for sq, piece in board.pieces(color):
        _gen_piece(board, sq, piece, last_move, moves)
    return moves


def _gen_piece(
    board: Board,
    sq: Square,
    piece: Piece,
    last_move: Move | None,
    moves: list[Move],
) -> None:
    ptype = piece.piece_type
    if ptype == PieceType.PAWN:
        _gen_pawn(board, sq, piece, last_move, moves)
    elif ptype in _LEAPER_TARGETS:
        _gen_leaper(board, sq, piece, _LEAPER_TARGETS[ptype][sq], moves)
    else:
        _gen_sliding(board, sq, piece, _SLIDER_RAYS[ptype][sq], moves)


def _gen_pawn(
    board: Board,
    sq: Square,
    pawn: Piece,
    last_move: Move | None,
    moves: list[Move],
) -> None:
    color = pawn.color
    forward = pawn_direction(color)
    last_rank = promotion_rank(color)

    one_step = sq.offset(0, forward)
    if one_step is None:
        return

    if board.is_empty(one_step):
        _add_pawn_moves(sq, one_step, pawn, None, last_rank, moves)
        if sq.rank == pawn_start_rank(color):
            two_step = Square(sq.file, sq.rank + 2 * forward)
            if board.is_empty(two_step):
                moves.append(NormalMove(sq, two_step, pawn))

    for df in (-1, 1):
        cap_sq = sq.offset(df, forward)
        if cap_sq is None:
            continue
        target = board[cap_sq]
        if target is not None:
            if target.color != color:
                _add_pawn_moves(sq, cap_sq, pawn, target, last_rank, moves)
            continue

        beside = Square(cap_sq.file, sq.rank)
        if _enables_en_passant(board, last_move, color, beside):
            assert isinstance(last_move, NormalMove)
            moves.append(EnPassantMove(sq, cap_sq, pawn, last_move.piece, beside))


def _add_pawn_moves(
    from_sq: Square,
    to_sq: Square,
    pawn: Piece,
    captured: Piece | None,
    last_rank: int,
    moves: list[Move],
) -> None:
    if to_sq.rank == last_rank:
        for pt in PROMOTION_TYPES:
            moves.append(NormalMove(from_sq, to_sq, pawn, captured, pt))
    else:
        moves.append(NormalMove(from_sq, to_sq, pawn, captured))


def _enables_en_passant(
    board: Board, last_move: Move | None, color: Color, beside: Square
) -> bool:
    """Did the previous half-move push an enemy pawn two squares onto *beside*?"""
    return (
        isinstance(last_move, NormalMove)
        and last_move.is_double_push
        and last_move.piece.color != color
        and last_move.to_sq == beside
        and board[beside] == last_move.piece
    )


def _gen_leaper(
    board: Board,
    sq: Square,
    piece: Piece,
    targets: tuple[Square, ...],
    moves: list[Move],
) -> None:
    for to_sq in targets:
        target = board[to_sq]
        if target is None:
            moves.append(NormalMove(sq, to_sq, piece))
        elif target.color != piece.color:
            moves.append(NormalMove(sq, to_sq, piece, target))


def _gen_sliding(
    board: Board,
    sq: Square,
    piece: Piece,
    rays: tuple[tuple[Square, ...], ...],
    moves: list[Move],
) -> None:
    for ray in rays:
        for to_sq in ray:
            target = board[to_sq]
            if target is None:
                moves.append(NormalMove(sq, to_sq, piece))
                continue
            if target.color != piece.color:
                moves.append(NormalMove(sq, to_sq, piece, target))
            break


# ── Attack detection ─────────────────────────────────────────────────────────


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?

    En passant is never considered: it cannot capture a king.
    """
    forward = pawn_direction(by_color)
    pawn = Piece(by_color, PieceType.PAWN)
    for df in (-1, 1):
        src = sq.offset(df, -forward)
        if src is not None and board[src] == pawn:
            return True

    knight = Piece(by_color, PieceType.KNIGHT)
    for src in _KNIGHT_TARGETS[sq]:
        if board[src] == knight:
            return True

    king = Piece(by_color, PieceType.KING)
    for src in _KING_TARGETS[sq]:
        if board[src] == king:
            return True

    for rays, kinds in (
        (_BISHOP_RAYS[sq], (PieceType.BISHOP, PieceType.QUEEN)),
        (_ROOK_RAYS[sq], (PieceType.ROOK, PieceType.QUEEN)),
    ):
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in kinds:
                    return True
                break

    return False


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?

    A side without a king is never in check.
    """
    king_sq = board.king_square(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq, color.opposite)


# ── Castling ─────────────────────────────────────────────────────────────────


def castling_moves(board: Board, color: Color, rights: CastlingRights) -> list[Move]:
    """Castles available to *color*: rights held, pieces home, path clear and safe."""
    moves: list[Move] = []
    if not rights & CastlingRights.both(color):
        return moves

    rank = back_rank(color)
    king_from = Square(4, rank)
    if board[king_from] != Piece(color, PieceType.KING):
        return moves
    if is_in_check(board, color):
        return moves

    rook = Piece(color, PieceType.ROOK)
    for right, rook_file, step in (
        (CastlingRights.kingside(color), 7, 1),
        (CastlingRights.queenside(color), 0, -1),
    ):
        if not rights & right:
            continue
        rook_from = Square(rook_file, rank)
        if board[rook_from] != rook:
            continue
        between = range(min(4, rook_file) + 1, max(4, rook_file))
        if any(board.piece_at(f, rank) is not None for f in between):
            continue
        if not _king_path_is_safe(board, color, king_from, step):
            continue
        moves.append(
            CastleMove(
                king_from=king_from,
                king_to=Square(4 + 2 * step, rank),
                rook_from=rook_from,
                rook_to=Square(4 + step, rank),
            )
        )
    return moves


def _king_path_is_safe(board: Board, color: Color, king_from: Square, step: int) -> bool:
    """Step the king onto the square it crosses and the one it lands on."""
    king = Piece(color, PieceType.KING)
    for distance in (1, 2):
        to_sq = Square(king_from.file + distance * step, king_from.rank)
        if not keeps_king_safe(board, color, NormalMove(king_from, to_sq, king)):
            return False
    return True


# ── Legality filter ──────────────────────────────────────────────────────────


def keeps_king_safe(board: Board, color: Color, move: Move) -> bool:
    """Would *color*'s king be out of check after *move*? The board is restored."""
    move.apply(board)
    safe = not is_in_check(board, color)
    move.undo(board)
    return safe


def _moves_king(move: Move) -> bool:
    if isinstance(move, CastleMove):
        return True
    return isinstance(move, NormalMove) and move.piece.piece_type == PieceType.KING


def legal_moves(
    board: Board,
    color: Color,
    rights: CastlingRights = CastlingRights.NONE,
    last_move: Move | None = None,
) -> list[Move]:
    """All strictly legal moves for *color*.

    Each candidate is applied, the mover's king probed for attack and the
    move undone, so *board* is left exactly as it was found.
    """
    candidates = pseudo_legal_moves(board, color, last_move)
    candidates.extend(castling_moves(board, color, rights))

    opponent = color.opposite
    king_sq = board.king_square(color)
    legal: list[Move] = []
    append_legal = legal.append

    for move in candidates:
        move.apply(board)
        probe = move.to_sq if _moves_king(move) else king_sq
        if probe is None or not is_square_attacked(board, probe, opponent):
            append_legal(move)
        move.undo(board)
    return legal


class MoveGenerator:
    """Generates moves for a given :class:`~rookie.core.game.Game`.

    The generator mutates the game's board via ``apply`` / ``undo``
    internally but always restores it before returning.
    """

    __slots__ = ("_game",)

    def __init__(self, game: Game) -> None:
        self._game = game

    # ── Public API ───────────────────────────────────────────────────────────

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        game = self._game
        return legal_moves(game.board, game.side_to_move, game.castling, game.last_move)

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal piece moves (may leave own king in check)."""
        game = self._game
        return pseudo_legal_moves(game.board, game.side_to_move, game.last_move)

    def generate_castling_moves(self) -> list[Move]:
        game = self._game
        return castling_moves(game.board, game.side_to_move, game.castling)

    def is_in_check(self, color: Color) -> bool:
        return is_in_check(self._game.board, color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return is_square_attacked(self._game.board, sq, by_color)
