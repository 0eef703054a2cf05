"""Compact position keys for repetition detection.

The board is packed two squares per byte, rank 8 first and files a→h within
a rank, the first square of each pair in the high nibble. Each square is the
piece's 4-bit code (see :attr:`Piece.nibble`) or ``0`` when empty, so a full
board is always 32 bytes. A position key appends one byte holding the side
to move and castling rights, and one more byte with the en passant file only
when the side to move has a legal en passant capture.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, PieceType
from rookie.core.move import EnPassantMove, Move, NormalMove
from rookie.core.move_generator import keeps_king_safe, piece_moves
from rookie.core.piece import Piece

if TYPE_CHECKING:
    from rookie.core.game import Game

BOARD_KEY_SIZE = 32


def encode_board(board: Board) -> bytes:
    """Pack the 64 squares of *board* into 32 bytes."""
    encoded = bytearray()
    for rank in range(7, -1, -1):
        for file in range(0, 8, 2):
            high = board.piece_at(file, rank)
            low = board.piece_at(file + 1, rank)
            encoded.append(
                ((high.nibble if high else 0) << 4) | (low.nibble if low else 0)
            )
    return bytes(encoded)


def decode_board(data: bytes) -> Board:
    """Inverse of :func:`encode_board`."""
    if len(data) < BOARD_KEY_SIZE:
        raise ValueError(f"Board encoding needs {BOARD_KEY_SIZE} bytes, got {len(data)}")
    board = Board()
    for idx, byte in enumerate(data[:BOARD_KEY_SIZE]):
        rank = 7 - idx // 4
        file = (idx % 4) * 2
        for offset, code in ((0, byte >> 4), (1, byte & 0xF)):
            if code:
                board.place(Piece.from_nibble(code), file + offset, rank)
    return board


def en_passant_file(board: Board, side: Color, last_move: Move | None) -> int | None:
    """File on which *side* may legally capture en passant right now, if any."""
    if not isinstance(last_move, NormalMove) or not last_move.is_double_push:
        return None
    landing = last_move.to_sq
    pawn = Piece(side, PieceType.PAWN)
    for df in (-1, 1):
        sq = landing.offset(df, 0)
        if sq is None or board[sq] != pawn:
            continue
        for move in piece_moves(board, sq, last_move):
            if isinstance(move, EnPassantMove) and keeps_king_safe(board, side, move):
                return landing.file
    return None


def compute_position_hash(
    board: Board,
    side: Color,
    castling: CastlingRights,
    last_move: Move | None,
) -> bytes:
    """Repetition key: board, side to move, castling rights, en passant."""
    key = encode_board(board) + bytes([(int(side) << 4) | (int(castling) & 0xF)])
    ep_file = en_passant_file(board, side, last_move)
    if ep_file is not None:
        key += bytes([ep_file])
    return key


def position_hash(game: Game) -> bytes:
    return compute_position_hash(
        game.board, game.side_to_move, game.castling, game.last_move
    )
