"""Outcome of classifying a game position."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from rookie.core.enums import Color, DrawReason
from rookie.core.move import Move


@dataclass(frozen=True, slots=True)
class InProgress:
    """Play continues; *turn* has at least one legal move."""

    legal_moves: tuple[Move, ...]
    turn: Color


@dataclass(frozen=True, slots=True)
class Check:
    """*turn* is in check but can escape with one of *legal_moves*."""

    legal_moves: tuple[Move, ...]
    turn: Color


@dataclass(frozen=True, slots=True)
class Checkmate:
    winner: Color


@dataclass(frozen=True, slots=True)
class Stalemate:
    pass


@dataclass(frozen=True, slots=True)
class DrawByClaim:
    """A draw the side to move may claim (only reported on request)."""

    reason: DrawReason


GameStatus: TypeAlias = InProgress | Check | Checkmate | Stalemate | DrawByClaim
