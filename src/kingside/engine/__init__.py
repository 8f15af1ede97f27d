"""Automated opponents.

The Qt worker lives in :mod:`kingside.engine.qt_bridge` and is imported
explicitly so the rules engine stays usable without a Qt event loop.
"""

from kingside.engine.search import (
    MATE_SCORE,
    Difficulty,
    IOpponent,
    SearchLimits,
)
from kingside.engine.strategies import (
    CaptureGreedyOpponent,
    MinimaxOpponent,
    RandomOpponent,
    opponent_for,
)

__all__ = [
    "MATE_SCORE",
    "CaptureGreedyOpponent",
    "Difficulty",
    "IOpponent",
    "MinimaxOpponent",
    "RandomOpponent",
    "SearchLimits",
    "opponent_for",
]
