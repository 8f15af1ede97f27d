"""Qt bridge to run an opponent in a worker thread."""

from __future__ import annotations

import random
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from kingside.core.enums import Color
from kingside.core.position import Position
from kingside.engine.search import Difficulty, SearchLimits
from kingside.engine.strategies import opponent_for


class EngineWorker(QObject):
    """Thread-affine worker that computes opponent moves on demand.

    Move it to a ``QThread`` and connect ``GameController.events.on_ai_turn``
    to :meth:`request_move`; hand ``move_ready`` results back with
    ``GameController.submit_ai_move``. The position passed in must be a copy
    owned by the worker for the duration of the search.
    """

    move_ready = pyqtSignal(int, object)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine", "_limits", "_rng")

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.HARD,
        *,
        limits: SearchLimits | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self._rng = rng or random.Random()
        self._limits = limits or SearchLimits()
        self._engine = opponent_for(difficulty, self._rng, self._limits)
        self._cancel_event = threading.Event()

    @pyqtSlot(object, object, int)
    def request_move(self, position_obj: object, color: object, request_id: int) -> None:
        """Choose a move for *color* in *position_obj* and emit the result."""
        if not isinstance(position_obj, Position) or not isinstance(color, Color):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        try:
            move = self._engine.choose_move(position_obj, color)
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if move is None:
            self.search_no_move.emit(request_id)
            return

        self.move_ready.emit(request_id, move)

    @pyqtSlot()
    def cancel(self) -> None:
        """Discard the result of the current search once it finishes."""
        self._cancel_event.set()

    @pyqtSlot(int)
    def set_difficulty(self, difficulty: int) -> None:
        """Switch strategy (takes effect on the next search)."""
        self._engine = opponent_for(Difficulty(difficulty), self._rng, self._limits)
