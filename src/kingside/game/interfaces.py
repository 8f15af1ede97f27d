"""Abstract interfaces and shared types for the game layer.

The presentation layer depends on :class:`IGameController` and reads
:class:`~kingside.game.state.GameState`; it never mutates core state itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from kingside.core.enums import Color

if TYPE_CHECKING:
    from kingside.core.enums import PieceType
    from kingside.core.types import Square
    from kingside.engine.search import Difficulty


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    AWAITING_PROMOTION = auto()  # a human pawn waits on the last rank
    THINKING = auto()  # AI is computing
    GAME_OVER = auto()


@dataclass(frozen=True, slots=True)
class PendingPromotion:
    """Pawn waiting on *square* for its owner to pick a piece."""

    square: Square
    color: Color


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IGameController(ABC):
    """Interface offered to the presentation collaborator."""

    @abstractmethod
    def select_piece(self, square: Square) -> bool:
        """Select the piece on *square* if it belongs to the side to move."""

    @abstractmethod
    def attempt_move(self, square: Square) -> bool:
        """Move the selected piece to *square*. Returns True if applied.

        Precondition: no promotion is pending.
        """

    @abstractmethod
    def resolve_promotion(self, piece_type: PieceType) -> bool:
        """Finish a pending promotion. Returns False if nothing was pending."""

    @abstractmethod
    def reset(self, difficulty: Difficulty | None = None) -> None:
        """Start a new game, optionally at another difficulty."""

    @abstractmethod
    def undo(self) -> bool:
        """Undo the last move. Returns True on success."""
