"""Tests for move variants: board apply/undo and display text."""

import pytest

from rookie.core.board import Board
from rookie.core.enums import Color, PieceType
from rookie.core.errors import InvalidMoveError
from rookie.core.move import CastleMove, EnPassantMove, NormalMove
from rookie.core.piece import Piece
from rookie.core.types import (
    A1, D1, E1, F1, G1, H1,
    D5, D6, D7, E2, E4, E5, E7, E8,
)

WP = Piece(Color.WHITE, PieceType.PAWN)
BP = Piece(Color.BLACK, PieceType.PAWN)
WK = Piece(Color.WHITE, PieceType.KING)
WR = Piece(Color.WHITE, PieceType.ROOK)
BN = Piece(Color.BLACK, PieceType.KNIGHT)


class TestNormalMove:
    def test_apply_and_undo(self) -> None:
        board = Board.initial()
        before = board.copy()
        move = NormalMove(E2, E4, WP)
        move.apply(board)
        assert board[E2] is None
        assert board[E4] == WP
        move.undo(board)
        assert board == before

    def test_capture_restores_victim(self) -> None:
        board = Board()
        board[E4] = WP
        board[D5] = BN
        move = NormalMove(E4, D5, WP, captured=BN)
        move.apply(board)
        assert board[D5] == WP
        move.undo(board)
        assert board[D5] == BN
        assert board[E4] == WP

    def test_promotion(self) -> None:
        board = Board()
        board[E7] = WP
        move = NormalMove(E7, E8, WP, promotion=PieceType.QUEEN)
        move.apply(board)
        assert board[E8] == Piece(Color.WHITE, PieceType.QUEEN)
        move.undo(board)
        assert board[E7] == WP
        assert board[E8] is None

    def test_empty_origin_raises(self) -> None:
        board = Board()
        with pytest.raises(InvalidMoveError, match="No piece to move on e2"):
            NormalMove(E2, E4, WP).apply(board)
        assert board == Board()

    def test_double_push(self) -> None:
        assert NormalMove(E2, E4, WP).is_double_push
        assert not NormalMove(E4, E5, WP).is_double_push
        assert not NormalMove(E1, E4.offset(0, -1), WR).is_double_push

    def test_is_capture(self) -> None:
        assert NormalMove(E4, D5, WP, captured=BN).is_capture
        assert not NormalMove(E2, E4, WP).is_capture

    def test_text(self) -> None:
        assert str(NormalMove(E2, E4, WP)) == "Pawn at e2 moves to e4"
        assert (
            str(NormalMove(E4, D5, WP, captured=BN))
            == "Pawn at e4 takes Knight at d5"
        )
        assert (
            str(NormalMove(E7, E8, WP, promotion=PieceType.KNIGHT))
            == "Pawn at e7 moves to e8 and promotes to Knight"
        )


class TestEnPassantMove:
    def _board(self) -> Board:
        board = Board()
        board[E5] = WP
        board[D5] = BP
        return board

    def test_apply_and_undo(self) -> None:
        board = self._board()
        before = board.copy()
        move = EnPassantMove(E5, D6, WP, BP, D5)
        move.apply(board)
        assert board[D6] == WP
        assert board[D5] is None
        assert board[E5] is None
        move.undo(board)
        assert board == before

    def test_missing_victim_raises_without_mutation(self) -> None:
        board = Board()
        board[E5] = WP
        with pytest.raises(InvalidMoveError):
            EnPassantMove(E5, D6, WP, BP, D5).apply(board)
        assert board[E5] == WP

    def test_text(self) -> None:
        move = EnPassantMove(E5, D6, WP, BP, D5)
        assert move.is_capture
        assert str(move) == "Pawn at e5 takes Pawn at d5 en passant, landing on d6"


class TestCastleMove:
    def _board(self) -> Board:
        board = Board()
        board[E1] = WK
        board[H1] = WR
        board[A1] = WR
        return board

    def test_kingside(self) -> None:
        board = self._board()
        before = board.copy()
        move = CastleMove(E1, G1, H1, F1)
        move.apply(board)
        assert board[G1] == WK
        assert board[F1] == WR
        assert board[H1] is None
        assert board[E1] is None
        move.undo(board)
        assert board == before

    def test_queenside_flags(self) -> None:
        move = CastleMove(E1, E1.offset(-2, 0), A1, D1)
        assert not move.is_kingside
        assert not move.is_capture
        assert move.from_sq == E1

    def test_missing_rook_raises_and_keeps_king(self) -> None:
        board = Board()
        board[E1] = WK
        with pytest.raises(InvalidMoveError, match="rook"):
            CastleMove(E1, G1, H1, F1).apply(board)
        assert board[E1] == WK

    def test_text(self) -> None:
        assert str(CastleMove(E1, G1, H1, F1)) == "King castles kingside from e1 to g1"


def test_moves_are_hashable_values() -> None:
    a = NormalMove(D7, D5, BP)
    b = NormalMove(D7, D5, BP)
    assert a == b
    assert len({a, b}) == 1
