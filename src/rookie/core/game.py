"""Game - complete chess state (board + metadata) with apply/undo."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, DrawReason, PieceType
from rookie.core.hashing import compute_position_hash
from rookie.core.move import CastleMove, EnPassantMove, Move, NormalMove
from rookie.core.move_generator import MoveGenerator
from rookie.core.piece import Piece
from rookie.core.rules import Rules
from rookie.core.status import GameStatus
from rookie.core.types import A1, A8, H1, H8, Square, parse_square

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _UndoFrame:
    """Snapshot saved before each move so we can undo it."""

    move: Move
    castling: CastlingRights
    halfmove_clock: int
    fullmove_number: int
    replaced_log: list[bytes] | None


# Corner square -> (owner, right lost when the rook leaves or is taken there)
_ROOK_CORNERS: dict[Square, tuple[Color, CastlingRights]] = {
    A1: (Color.WHITE, CastlingRights.WHITE_QUEENSIDE),
    H1: (Color.WHITE, CastlingRights.WHITE_KINGSIDE),
    A8: (Color.BLACK, CastlingRights.BLACK_QUEENSIDE),
    H8: (Color.BLACK, CastlingRights.BLACK_KINGSIDE),
}


def _moved_piece(move: Move) -> Piece:
    if isinstance(move, NormalMove):
        return move.piece
    if isinstance(move, EnPassantMove):
        return move.pawn
    return Piece(Color.WHITE if move.king_from.rank == 0 else Color.BLACK, PieceType.KING)


def _lost_rook_corner(piece: Piece | None, sq: Square) -> CastlingRights:
    if piece is None or piece.piece_type != PieceType.ROOK:
        return CastlingRights.NONE
    owner, right = _ROOK_CORNERS.get(sq, (None, CastlingRights.NONE))
    return right if owner == piece.color else CastlingRights.NONE


class Game:
    """Full chess game: board, side to move, castling rights, clocks, history.

    Moves go through :meth:`apply` / :meth:`undo`; every applied move pushes a
    frame holding the scalars it overwrote, so undo is exact. The position
    log holds repetition keys since the last irreversible move.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "halfmove_clock",
        "fullmove_number",
        "_ep_seed",
        "_frames",
        "_position_log",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
        last_move: Move | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._ep_seed = last_move
        self._frames: list[_UndoFrame] = []
        self._position_log: list[bytes] = [self.position_hash()]

    # ── Construction ─────────────────────────────────────────────────────────

    @classmethod
    def new_standard(cls) -> Game:
        """Standard starting position, White to move."""
        return cls()

    @classmethod
    def from_fen(cls, fen: str, strict: bool = False) -> Game:
        from rookie.core.notation.fen import game_from_fen

        return game_from_fen(fen, strict=strict)

    def to_fen(self) -> str:
        from rookie.core.notation.fen import game_to_fen

        return game_to_fen(self)

    # ── Move queries ─────────────────────────────────────────────────────────

    def legal_moves(self) -> list[Move]:
        return MoveGenerator(self).generate_legal_moves()

    def pseudo_legal_moves(self) -> list[Move]:
        return MoveGenerator(self).generate_pseudo_legal_moves()

    def find_move(
        self,
        from_sq: Square | str,
        to_sq: Square | str,
        promotion: PieceType | None = None,
    ) -> Move | None:
        """The legal move between two squares, or ``None`` if there is none.

        Promotions match only when *promotion* names the piece to promote to.
        """
        if isinstance(from_sq, str):
            from_sq = parse_square(from_sq)
        if isinstance(to_sq, str):
            to_sq = parse_square(to_sq)
        for move in self.legal_moves():
            if move.from_sq != from_sq or move.to_sq != to_sq:
                continue
            if getattr(move, "promotion", None) == promotion:
                return move
        return None

    # ── Core move operations ─────────────────────────────────────────────────

    def apply(self, move: Move) -> None:
        """Play *move* for the side to move.

        The move is trusted to be legal; only a missing piece is detected
        (by the board mutation, before any state changes).
        """
        move.apply(self.board)
        frame = _UndoFrame(
            move=move,
            castling=self.castling,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            replaced_log=None,
        )
        self._frames.append(frame)

        piece = _moved_piece(move)
        self.castling = self._updated_castling(move, piece)

        irreversible = (
            piece.piece_type == PieceType.PAWN
            or move.is_capture
            or isinstance(move, CastleMove)
        )
        if irreversible:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opposite

        key = self.position_hash()
        if irreversible or self.castling != frame.castling:
            frame.replaced_log = self._position_log
            self._position_log = [key]
            _LOGGER.debug("Irreversible move %s; repetition log reset", move)
        else:
            self._position_log.append(key)

        _LOGGER.debug(
            "Applied %s; %s to move, halfmove clock %d",
            move,
            self.side_to_move,
            self.halfmove_clock,
        )

    def undo(self) -> Move | None:
        """Take back the last move; ``None`` if nothing has been played."""
        if not self._frames:
            _LOGGER.warning("Undo requested with an empty move history")
            return None
        frame = self._frames.pop()
        frame.move.undo(self.board)

        self.side_to_move = self.side_to_move.opposite
        self.castling = frame.castling
        self.halfmove_clock = frame.halfmove_clock
        self.fullmove_number = frame.fullmove_number
        if frame.replaced_log is not None:
            self._position_log = frame.replaced_log
        else:
            self._position_log.pop()

        _LOGGER.debug("Undid %s; %s to move", frame.move, self.side_to_move)
        return frame.move

    # ── Castling bookkeeping ─────────────────────────────────────────────────

    def _updated_castling(self, move: Move, piece: Piece) -> CastlingRights:
        rights = self.castling
        if piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(piece.color)
        rights &= ~_lost_rook_corner(piece, move.from_sq)
        if isinstance(move, NormalMove):
            rights &= ~_lost_rook_corner(move.captured, move.to_sq)
        return rights

    # ── Status ───────────────────────────────────────────────────────────────

    def is_in_check(self) -> bool:
        return Rules.is_in_check(self)

    def status(self, honor_draw_claims: bool = False) -> GameStatus:
        return Rules.game_status(self, honor_draw_claims=honor_draw_claims)

    def can_claim_draw(self) -> DrawReason | None:
        return Rules.can_claim_draw(self)

    def position_hash(self) -> bytes:
        """Repetition key of the current position."""
        return compute_position_hash(
            self.board, self.side_to_move, self.castling, self.last_move
        )

    def repetition_count(self) -> int:
        """How many times the current position occurred since the last irreversible move."""
        return self._position_log.count(self._position_log[-1])

    # ── Accessors ────────────────────────────────────────────────────────────

    @property
    def history(self) -> tuple[Move, ...]:
        return tuple(frame.move for frame in self._frames)

    @property
    def position_log(self) -> tuple[bytes, ...]:
        return tuple(self._position_log)

    @property
    def last_move(self) -> Move | None:
        """The move just played, or the en passant seed of a FEN position."""
        if self._frames:
            return self._frames[-1].move
        return self._ep_seed

    # ── Utilities ────────────────────────────────────────────────────────────

    def copy(self) -> Game:
        """Independent copy, history included."""
        game = Game.__new__(Game)
        game.board = self.board.copy()
        game.side_to_move = self.side_to_move
        game.castling = self.castling
        game.halfmove_clock = self.halfmove_clock
        game.fullmove_number = self.fullmove_number
        game._ep_seed = self._ep_seed
        game._frames = [
            replace(
                frame,
                replaced_log=None
                if frame.replaced_log is None
                else frame.replaced_log.copy(),
            )
            for frame in self._frames
        ]
        game._position_log = self._position_log.copy()
        return game

    def __repr__(self) -> str:
        return (
            f"Game(side_to_move={self.side_to_move!s}, castling={self.castling!r}, "
            f"halfmove_clock={self.halfmove_clock}, "
            f"fullmove_number={self.fullmove_number}, moves={len(self._frames)})"
        )
