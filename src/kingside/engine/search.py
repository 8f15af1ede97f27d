"""Shared opponent models and protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from kingside.core.enums import Color
    from kingside.core.move import Move
    from kingside.core.position import Position

MATE_SCORE = 100_000


class Difficulty(IntEnum):
    """Opponent strength tiers."""

    EASY = auto()  # uniform random
    MEDIUM = auto()  # greedy capture
    HARD = auto()  # depth-limited minimax


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Minimax constraints.

    Attributes:
        max_depth: Plies searched from the root.
        noise: Maximum relative perturbation of a leaf score (0.05 = ±5 %).
    """

    max_depth: int = 2
    noise: float = 0.05


class IOpponent(Protocol):
    """Protocol for automated opponents used by the game layer.

    ``choose_move`` returns ``None`` if and only if *color* has no legal move.
    Implementations may make and unmake moves on *position* but must leave it
    exactly as they found it.
    """

    def choose_move(self, position: Position, color: Color) -> Move | None: ...
