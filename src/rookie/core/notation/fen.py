"""FEN parsing and serialization."""

from __future__ import annotations

import logging

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, PieceType
from rookie.core.errors import FenError
from rookie.core.game import Game
from rookie.core.move import NormalMove
from rookie.core.piece import Piece
from rookie.core.types import Square, parse_square, square_name

_LOGGER = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def game_from_fen(fen: str, strict: bool = False) -> Game:
    """Parse a FEN string into a :class:`Game`.

    With *strict* the board must hold exactly one king of each color.
    Raises :class:`FenError` on any malformed field.
    """
    try:
        game = _parse(fen, strict)
    except FenError as exc:
        _LOGGER.debug("Rejected FEN %r: %s", fen, exc)
        raise
    _LOGGER.debug("Parsed FEN %r", fen)
    return game


def _parse(fen: str, strict: bool) -> Game:
    parts = fen.split()
    if len(parts) != 6:
        raise FenError(f"Invalid FEN (need 6 fields, got {len(parts)}): {fen!r}")

    placement, side_part, castling_part, ep_part, half_part, full_part = parts

    # 1. Piece placement
    board = _parse_placement(placement)
    if strict:
        for color in (Color.WHITE, Color.BLACK):
            kings = sum(
                1
                for _, piece in board.pieces(color)
                if piece.piece_type == PieceType.KING
            )
            if kings != 1:
                raise FenError(f"Invalid FEN: {color!s} has {kings} kings: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise FenError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        order = "".join(ch for ch in _CASTLING_CHARS if ch in castling_part)
        if castling_part != order:
            raise FenError(f"Invalid FEN castling field: {castling_part!r}")
        for ch in castling_part:
            castling |= _CASTLING_CHARS[ch]

    # 4. En passant
    seed = None if ep_part == "-" else _en_passant_seed(board, side, ep_part)

    # 5-6. Clocks
    halfmove = _parse_int(half_part, "halfmove clock")
    fullmove = _parse_int(full_part, "fullmove number")
    if fullmove < 1:
        raise FenError(f"Invalid FEN fullmove number: {full_part!r}")

    return Game(board, side, castling, halfmove, fullmove, last_move=seed)


def _parse_placement(placement: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FenError(f"Invalid FEN board (must contain 8 ranks): {placement!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in "0123456789":
                step = int(ch)
                if not (1 <= step <= 8):
                    raise FenError(f"Invalid FEN digit {ch!r} in {rank_text!r}")
                file += step
            else:
                if file >= 8:
                    raise FenError(f"Invalid FEN rank width: {rank_text!r}")
                try:
                    piece = Piece.from_char(ch)
                except ValueError:
                    raise FenError(
                        f"Invalid FEN piece letter {ch!r} in {rank_text!r}"
                    ) from None
                board.place(piece, file, rank)
                file += 1
            if file > 8:
                raise FenError(f"Invalid FEN rank width: {rank_text!r}")
        if file != 8:
            raise FenError(f"Invalid FEN rank width: {rank_text!r}")
    return board


def _en_passant_seed(board: Board, side: Color, ep_part: str) -> NormalMove:
    """Rebuild the double push that left *ep_part* behind the pawn."""
    try:
        target = parse_square(ep_part)
    except ValueError:
        raise FenError(f"Invalid FEN en-passant square: {ep_part!r}") from None

    pusher = side.opposite
    expected_rank = 2 if pusher == Color.WHITE else 5
    if target.rank != expected_rank:
        raise FenError(f"Invalid FEN en-passant square for side-to-move: {ep_part!r}")

    step = 1 if pusher == Color.WHITE else -1
    landing = Square(target.file, target.rank + step)
    pawn = Piece(pusher, PieceType.PAWN)
    if board[landing] != pawn:
        raise FenError(
            f"Invalid FEN en-passant square {ep_part!r}: no pawn on {landing.name}"
        )
    origin = Square(target.file, target.rank - step)
    for sq in (target, origin):
        if not board.is_empty(sq):
            raise FenError(
                f"Invalid FEN en-passant square {ep_part!r}: {sq.name} is occupied"
            )
    return NormalMove(origin, landing, pawn)


def _parse_int(text: str, what: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise FenError(f"Invalid FEN {what}: {text!r}")
    return int(text)


def game_to_fen(game: Game) -> str:
    """Serialise a :class:`Game` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = game.board.piece_at(file, rank)
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if game.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(
        ch for ch, right in _CASTLING_CHARS.items() if game.castling & right
    )
    if not castling_str:
        castling_str = "-"

    # 4. En passant: the square the last double push skipped over
    ep_str = "-"
    last = game.last_move
    if isinstance(last, NormalMove) and last.is_double_push:
        ep_str = square_name(
            Square(last.to_sq.file, (last.from_sq.rank + last.to_sq.rank) // 2)
        )

    fen = (
        f"{board_str} {side_str} {castling_str} {ep_str} "
        f"{game.halfmove_clock} {game.fullmove_number}"
    )
    _LOGGER.debug("Serialised game to FEN %r", fen)
    return fen
