"""Move generator tests, with perft as the gold standard for correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, PieceType
from rookie.core.game import Game
from rookie.core.move import CastleMove, EnPassantMove, NormalMove
from rookie.core.move_generator import (
    MoveGenerator,
    castling_moves,
    is_in_check,
    is_square_attacked,
    legal_moves,
    piece_moves,
    pseudo_legal_moves,
)
from rookie.core.notation import STARTING_FEN, game_from_fen
from rookie.core.piece import Piece
from rookie.core.types import A7, A8, C1, C5, D1, D5, D6, E1, E4, E8, G1, parse_square


def perft(game: Game, depth: int) -> int:
    """Count leaf nodes at *depth* using apply/undo."""
    moves = game.legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        game.apply(move)
        nodes += perft(game, depth - 1)
        game.undo()
    return nodes


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(game_from_fen(STARTING_FEN), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(game_from_fen(STARTING_FEN), 2) == 400

    def test_depth_3(self) -> None:
        assert perft(game_from_fen(STARTING_FEN), 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        assert perft(game_from_fen(STARTING_FEN), 4) == 197_281


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        assert perft(game_from_fen(KIWIPETE), 1) == 48

    def test_depth_2(self) -> None:
        assert perft(game_from_fen(KIWIPETE), 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(game_from_fen(KIWIPETE), 3) == 97_862


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        assert perft(game_from_fen(POS3), 1) == 14

    def test_depth_2(self) -> None:
        assert perft(game_from_fen(POS3), 2) == 191

    def test_depth_3(self) -> None:
        assert perft(game_from_fen(POS3), 3) == 2_812


# ── Position 4: promotions, castling while pinned ───────────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        assert perft(game_from_fen(POS4), 1) == 6

    def test_depth_2(self) -> None:
        assert perft(game_from_fen(POS4), 2) == 264

    def test_depth_3(self) -> None:
        assert perft(game_from_fen(POS4), 3) == 9_467


# ── Position 5 ──────────────────────────────────────────────────────────────

POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


class TestPerftPos5:
    def test_depth_1(self) -> None:
        assert perft(game_from_fen(POS5), 1) == 44

    def test_depth_2(self) -> None:
        assert perft(game_from_fen(POS5), 2) == 1_486

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(game_from_fen(POS5), 3) == 62_379


# ── Pseudo-legal generation ─────────────────────────────────────────────────


class TestPseudoLegal:
    def test_starting_pawn_and_knight_moves(self) -> None:
        moves = pseudo_legal_moves(Board.initial(), Color.WHITE)
        pawn_moves = [m for m in moves if m.piece.piece_type == PieceType.PAWN]
        knight_moves = [m for m in moves if m.piece.piece_type == PieceType.KNIGHT]
        assert len(pawn_moves) == 16
        assert len(knight_moves) == 4
        assert len(moves) == 20

    def test_empty_square_has_no_moves(self) -> None:
        assert piece_moves(Board.initial(), E4) == []

    def test_promotions_offer_four_pieces(self) -> None:
        game = game_from_fen("8/4P3/8/8/8/8/8/8 w - - 0 1")
        moves = game.legal_moves()
        assert len(moves) == 4
        assert {m.promotion for m in moves} == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }

    def test_capture_promotion(self) -> None:
        game = game_from_fen("3r4/4P3/8/8/8/8/8/8 w - - 0 1")
        captures = [m for m in game.legal_moves() if m.is_capture]
        assert len(captures) == 4
        assert all(m.captured == Piece(Color.BLACK, PieceType.ROOK) for m in captures)

    def test_blocked_pawn(self) -> None:
        game = game_from_fen("8/8/8/8/8/4n3/4P3/8 w - - 0 1")
        assert game.legal_moves() == []

    def test_double_push_blocked_on_landing(self) -> None:
        game = game_from_fen("8/8/8/8/4n3/8/4P3/8 w - - 0 1")
        assert [str(m.to_sq) for m in game.legal_moves()] == ["e3"]

    def test_sliders_stop_at_pieces(self) -> None:
        game = game_from_fen("8/8/8/8/8/8/1p6/RN6 w - - 0 1")
        rook_moves = [m for m in game.legal_moves() if m.piece.piece_type == PieceType.ROOK]
        # a2 through a8; b1 holds a knight
        assert len(rook_moves) == 7

    def test_legal_is_subset_of_pseudo_legal(self) -> None:
        game = game_from_fen(KIWIPETE)
        pseudo = set(game.pseudo_legal_moves())
        for move in game.legal_moves():
            if not isinstance(move, CastleMove):
                assert move in pseudo


# ── Check detection and legality ────────────────────────────────────────────


class TestCheckDetection:
    def test_rook_attacks_along_file(self) -> None:
        game = game_from_fen("4k3/8/8/8/8/8/8/4R3 b - - 0 1")
        assert is_in_check(game.board, Color.BLACK)
        assert not is_in_check(game.board, Color.WHITE)

    def test_pawn_attacks_diagonally(self) -> None:
        board = Board()
        board[D5] = Piece(Color.BLACK, PieceType.PAWN)
        assert is_square_attacked(board, parse_square("e4"), Color.BLACK)
        assert is_square_attacked(board, parse_square("c4"), Color.BLACK)
        assert not is_square_attacked(board, parse_square("d4"), Color.BLACK)

    def test_kingless_side_is_never_in_check(self) -> None:
        assert not is_in_check(Board(), Color.WHITE)

    def test_legal_moves_leave_king_safe(self) -> None:
        for fen in (KIWIPETE, POS4, POS5):
            game = game_from_fen(fen)
            mover = game.side_to_move
            for move in game.legal_moves():
                game.apply(move)
                assert not is_in_check(game.board, mover), f"{fen}: {move}"
                game.undo()

    def test_check_must_be_escaped(self) -> None:
        game = game_from_fen("4k3/8/8/8/8/8/8/r3R3 b - - 0 1")
        assert game.is_in_check()
        moves = game.legal_moves()
        assert len(moves) == 5
        for move in moves:
            game.apply(move)
            assert not is_in_check(game.board, Color.BLACK)
            game.undo()

    def test_back_rank_checkmate_has_no_moves(self) -> None:
        game = game_from_fen("k6R/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b - - 0 1")
        assert game.legal_moves() == []

    def test_single_escape(self) -> None:
        game = game_from_fen("k6R/1ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b - - 0 1")
        moves = game.legal_moves()
        assert len(moves) == 1
        assert (moves[0].from_sq, moves[0].to_sq) == (A8, A7)

    def test_smothered_by_own_pieces(self) -> None:
        game = game_from_fen("8/8/8/8/2n5/1p5r/K7/BB6 w - - 0 1")
        assert game.legal_moves() == []

    def test_pinned_bishop_cannot_move(self) -> None:
        game = game_from_fen("K2B3r/8/8/8/8/8/8/8 w - - 0 1")
        moves = game.legal_moves()
        assert len(moves) == 3
        assert all(m.piece.piece_type == PieceType.KING for m in moves)

    def test_stalemate_has_no_moves(self) -> None:
        game = game_from_fen("1r4b1/8/8/8/8/8/8/K7 w - - 0 1")
        assert game.legal_moves() == []
        assert not game.is_in_check()

    def test_board_restored_after_generation(self) -> None:
        game = game_from_fen(KIWIPETE)
        before = game.board.copy()
        game.legal_moves()
        assert game.board == before

    def test_generation_is_deterministic(self) -> None:
        game = game_from_fen(KIWIPETE)
        assert game.legal_moves() == game.legal_moves()


# ── En passant ──────────────────────────────────────────────────────────────


class TestEnPassant:
    def test_capture_available(self) -> None:
        game = game_from_fen("8/8/8/2Pp4/8/8/8/2K5 w - d6 0 1")
        moves = game.legal_moves()
        assert len(moves) == 7
        ep = [m for m in moves if isinstance(m, EnPassantMove)]
        assert len(ep) == 1
        assert (ep[0].from_sq, ep[0].to_sq, ep[0].captured_square) == (C5, D6, D5)

    def test_pinned_pawn_cannot_capture(self) -> None:
        game = game_from_fen("2r5/8/8/2Pp4/8/8/8/2K5 w - d6 0 1")
        moves = game.legal_moves()
        assert len(moves) == 6
        assert not any(isinstance(m, EnPassantMove) for m in moves)

    def test_without_target_no_capture(self) -> None:
        game = game_from_fen("8/8/8/2Pp4/8/8/8/2K5 w - - 0 1")
        assert not any(isinstance(m, EnPassantMove) for m in game.legal_moves())

    def test_only_immediately_after_the_push(self) -> None:
        game = game_from_fen("4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1")
        game.apply(game.find_move("d7", "d5"))
        assert any(isinstance(m, EnPassantMove) for m in game.legal_moves())

        game.apply(game.find_move("e1", "d1"))
        game.apply(game.find_move("e8", "d8"))
        assert not any(isinstance(m, EnPassantMove) for m in game.legal_moves())

    def test_stale_push_is_ignored(self) -> None:
        board = Board()
        board[C5] = Piece(Color.WHITE, PieceType.PAWN)
        board[D5] = Piece(Color.BLACK, PieceType.PAWN)
        stale = NormalMove(
            parse_square("d7"), D5, Piece(Color.BLACK, PieceType.KNIGHT)
        )
        assert not any(
            isinstance(m, EnPassantMove) for m in piece_moves(board, C5, stale)
        )


# ── Castling ────────────────────────────────────────────────────────────────


class TestCastling:
    def test_both_sides_available(self) -> None:
        game = game_from_fen("8/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        castles = [m for m in game.legal_moves() if isinstance(m, CastleMove)]
        assert {m.king_to for m in castles} == {G1, C1}

    def test_not_out_of_check(self) -> None:
        game = game_from_fen("4r3/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        moves = game.legal_moves()
        assert len(moves) == 4
        assert not any(isinstance(m, CastleMove) for m in moves)

    def test_not_through_attacked_square(self) -> None:
        game = game_from_fen("3r4/8/8/8/8/8/8/R3K3 w Q - 0 1")
        assert not any(isinstance(m, CastleMove) for m in game.legal_moves())

    def test_not_into_attacked_square(self) -> None:
        game = game_from_fen("2r5/8/8/8/8/8/8/R3K3 w Q - 0 1")
        assert not any(isinstance(m, CastleMove) for m in game.legal_moves())

    def test_not_through_pieces(self) -> None:
        game = game_from_fen("8/8/8/8/8/8/8/R1P1K1bR w KQ - 0 1")
        assert not any(isinstance(m, CastleMove) for m in game.legal_moves())

    def test_requires_rights(self) -> None:
        game = game_from_fen("8/8/8/8/8/8/8/R3K2R w kq - 0 1")
        assert not any(isinstance(m, CastleMove) for m in game.legal_moves())

    def test_queenside_b_file_may_be_attacked(self) -> None:
        game = game_from_fen("1r6/8/8/8/8/8/8/R3K3 w Q - 0 1")
        castles = castling_moves(game.board, Color.WHITE, game.castling)
        assert [m.king_to for m in castles] == [C1]

    def test_requires_rook_on_corner(self) -> None:
        board = Board()
        board[E1] = Piece(Color.WHITE, PieceType.KING)
        board[D1] = Piece(Color.WHITE, PieceType.ROOK)
        assert castling_moves(board, Color.WHITE, CastlingRights.ALL) == []

    def test_requires_king_on_origin(self) -> None:
        game = game_from_fen("8/8/8/8/8/8/8/R4K1R w KQ - 0 1")
        assert not any(isinstance(m, CastleMove) for m in game.legal_moves())
        assert castling_moves(game.board, Color.WHITE, game.castling) == []

        game = game_from_fen("r2k3r/8/8/8/8/8/8/8 b kq - 0 1")
        assert castling_moves(game.board, Color.BLACK, game.castling) == []

    def test_black_castles(self) -> None:
        game = game_from_fen("r3k2r/8/8/8/8/8/8/4K3 b kq - 0 1")
        castles = MoveGenerator(game).generate_castling_moves()
        assert len(castles) == 2
        assert all(m.king_from == E8 for m in castles)


class TestMoveGenerator:
    def test_bound_to_game(self) -> None:
        game = game_from_fen(STARTING_FEN)
        gen = MoveGenerator(game)
        assert len(gen.generate_legal_moves()) == 20
        assert len(gen.generate_pseudo_legal_moves()) == 20
        assert gen.generate_castling_moves() == []
        assert not gen.is_in_check(Color.WHITE)
        assert gen.is_square_attacked(parse_square("f3"), Color.WHITE)

    def test_module_legal_moves_defaults(self) -> None:
        board = Board.initial()
        assert len(legal_moves(board, Color.BLACK)) == 20
