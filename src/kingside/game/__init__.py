"""Game management layer — controller and state machine.

Quick start::

    from kingside.core.types import E2, E4
    from kingside.engine import Difficulty
    from kingside.game import GameController

    ctrl = GameController(Difficulty.HARD)
    ctrl.select_piece(E2)
    ctrl.attempt_move(E4)  # black replies before this returns
"""

from kingside.game.controller import GameController, GameEvents
from kingside.game.interfaces import GamePhase, IGameController, PendingPromotion
from kingside.game.state import (
    PROMOTION_CHOICES,
    GameState,
    HistoryEntry,
    MoveRecord,
)

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    "PendingPromotion",
    # Concrete
    "GameController",
    "GameEvents",
    "GameState",
    "HistoryEntry",
    "MoveRecord",
    "PROMOTION_CHOICES",
]
