"""High-level chess rules: checkmate, stalemate, draw claims."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookie.core.enums import Color, DrawReason, PieceType
from rookie.core.move_generator import MoveGenerator
from rookie.core.status import (
    Check,
    Checkmate,
    DrawByClaim,
    GameStatus,
    InProgress,
    Stalemate,
)

if TYPE_CHECKING:
    from rookie.core.game import Game

_MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)


class Rules:
    """Static rule-checker that operates on a :class:`Game`."""

    # Draws are claims, never automatic: the classifier reports them only
    # when asked to honor claims.

    @staticmethod
    def is_in_check(game: Game) -> bool:
        gen = MoveGenerator(game)
        return gen.is_in_check(game.side_to_move)

    @staticmethod
    def is_checkmate(game: Game) -> bool:
        if not Rules.is_in_check(game):
            return False
        gen = MoveGenerator(game)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def is_stalemate(game: Game) -> bool:
        if Rules.is_in_check(game):
            return False
        gen = MoveGenerator(game)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def is_insufficient_material(game: Game) -> bool:
        """Each side has a bare king, or a king with a single bishop or knight."""
        for color in (Color.WHITE, Color.BLACK):
            material = [
                piece.piece_type
                for _, piece in game.board.pieces(color)
                if piece.piece_type != PieceType.KING
            ]
            if len(material) > 1:
                return False
            if material and material[0] not in _MINOR_PIECES:
                return False
        return True

    @staticmethod
    def is_fifty_move_rule(game: Game) -> bool:
        return game.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def is_threefold_repetition(game: Game) -> bool:
        return game.repetition_count() >= 3

    @staticmethod
    def can_claim_draw(game: Game) -> DrawReason | None:
        """First available draw claim, checked in :class:`DrawReason` order."""
        if Rules.is_insufficient_material(game):
            return DrawReason.INSUFFICIENT_MATERIAL
        if Rules.is_fifty_move_rule(game):
            return DrawReason.FIFTY_MOVE
        if Rules.is_threefold_repetition(game):
            return DrawReason.REPETITION
        return None

    @staticmethod
    def game_status(game: Game, honor_draw_claims: bool = False) -> GameStatus:
        """Classify the current position.

        Checkmate and stalemate always win over a pending draw claim.
        """
        gen = MoveGenerator(game)
        legal_moves = gen.generate_legal_moves()
        in_check = gen.is_in_check(game.side_to_move)

        if not legal_moves:
            if in_check:
                return Checkmate(winner=game.side_to_move.opposite)
            return Stalemate()

        if honor_draw_claims:
            reason = Rules.can_claim_draw(game)
            if reason is not None:
                return DrawByClaim(reason)

        if in_check:
            return Check(tuple(legal_moves), game.side_to_move)
        return InProgress(tuple(legal_moves), game.side_to_move)
