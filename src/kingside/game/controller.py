"""GameController — the central orchestrator of a chess game.

Coordinates: GameState, MoveGenerator and the automated opponent.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from kingside.core.enums import Color, GameResult, PieceType
from kingside.core.move import Move
from kingside.core.position import Position
from kingside.core.types import Square
from kingside.engine.search import Difficulty, IOpponent, SearchLimits
from kingside.engine.strategies import opponent_for
from kingside.game.interfaces import GamePhase, IGameController
from kingside.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameState], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]
AiTurnCallback = Callable[[Position, Color], None]  # position copy, color


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_ai_turn: list[AiTurnCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Runs a human-vs-computer (or hot-seat) game.

    Every call runs to completion before returning. With
    ``synchronous_ai=True`` the opponent's reply is computed inside the
    call that ended the human's turn. With ``synchronous_ai=False`` the
    controller only fires ``events.on_ai_turn`` and waits for
    :meth:`submit_ai_move`, so the search can run on a worker thread.

    Args:
        difficulty: Opponent strength.
        ai_color: Side played by the computer, ``None`` for two humans.
        rng: Random source shared by the opponent strategies.
        limits: Minimax configuration for :attr:`Difficulty.HARD`.
        synchronous_ai: Whether to search inline.
    """

    __slots__ = (
        "_state",
        "_difficulty",
        "_ai_color",
        "_rng",
        "_limits",
        "_synchronous_ai",
        "_opponent",
        "events",
    )

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.EASY,
        *,
        ai_color: Color | None = Color.BLACK,
        rng: random.Random | None = None,
        limits: SearchLimits | None = None,
        synchronous_ai: bool = True,
    ) -> None:
        self._state = GameState()
        self._difficulty = difficulty
        self._ai_color = ai_color
        self._rng = rng or random.Random()
        self._limits = limits or SearchLimits()
        self._synchronous_ai = synchronous_ai
        self._opponent: IOpponent | None = None
        self.events = GameEvents()
        self.reset(difficulty)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def ai_color(self) -> Color | None:
        return self._ai_color

    @property
    def opponent(self) -> IOpponent | None:
        return self._opponent

    @property
    def is_ai_turn(self) -> bool:
        return self._is_ai(self._state.current_player)

    # ── IGameController impl ─────────────────────────────────────────────

    def select_piece(self, square: Square) -> bool:
        if self._state.phase != GamePhase.AWAITING_MOVE or self.is_ai_turn:
            return False
        return self._state.select(square)

    def attempt_move(self, square: Square) -> bool:
        state = self._state
        if state.pending_promotion is not None or state.selected_piece is None:
            return False
        if square not in state.legal_moves:
            return False

        self._play(Move(state.selected_piece.position, square))
        return True

    def resolve_promotion(self, piece_type: PieceType) -> bool:
        pending = self._state.pending_promotion
        if not self._state.complete_promotion(piece_type):
            return False
        _LOGGER.debug("%s promoted to %s", pending.color, piece_type.name.lower())
        self._after_turn()
        return True

    def reset(
        self,
        difficulty: Difficulty | None = None,
        *,
        position: Position | None = None,
        current_player: Color = Color.WHITE,
    ) -> None:
        """Start a new game from the initial position (or *position*)."""
        if difficulty is not None:
            self._difficulty = difficulty
        if self._ai_color is not None:
            self._opponent = opponent_for(self._difficulty, self._rng, self._limits)
        else:
            self._opponent = None

        self._state.setup(position, current_player)
        _LOGGER.debug("new game, difficulty %s", self._difficulty.name.lower())
        self._prompt_current_player()

    def undo(self) -> bool:
        state = self._state
        if not state.undo_last_move():
            return False
        # Rewind the computer's reply as well so the human is back on move.
        while self.is_ai_turn and state.history:
            state.undo_last_move()

        _LOGGER.debug("undo: %d plies remain", state.ply_count)
        self._after_turn()
        return True

    # ── Asynchronous opponent hand-off ───────────────────────────────────

    def submit_ai_move(self, move: Move) -> bool:
        """Apply a move computed off-thread. Returns True if legal and applied."""
        state = self._state
        if not self.is_ai_turn or state.phase != GamePhase.THINKING:
            return False
        if move not in state.all_legal_moves():
            return False
        self._play(move)
        return True

    def request_ai_move(self) -> bool:
        """Fire ``events.on_ai_turn`` again for the pending computer move.

        Needed when the computer moves first: the constructor's request is
        sent before any subscriber can attach. Returns False unless the
        controller is waiting on an asynchronous reply.
        """
        if self._synchronous_ai or not self.is_ai_turn:
            return False
        if self._state.phase != GamePhase.THINKING:
            return False
        self._emit_ai_turn()
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _is_ai(self, color: Color) -> bool:
        return self._ai_color is not None and color == self._ai_color

    def _play(self, move: Move) -> None:
        color = self._state.current_player
        record = self._state.apply_move(move, auto_promote=self._is_ai(color))
        _LOGGER.debug("%s played %s", color, move)
        self._emit_move(record)

        if self._state.pending_promotion is not None:
            self._emit_phase(GamePhase.AWAITING_PROMOTION)
            return
        self._after_turn()

    def _after_turn(self) -> None:
        state = self._state
        if state.is_game_over:
            _LOGGER.info(
                "%s has no legal moves (%s)",
                state.current_player,
                "checkmate" if state.is_checkmate else "stalemate",
            )
            self._emit_game_over(state.result)
            return
        self._prompt_current_player()

    def _prompt_current_player(self) -> None:
        """Hand the turn to the human or start the computer's move."""
        state = self._state
        if state.is_game_over:
            self._emit_phase(GamePhase.GAME_OVER)
            return

        if not self.is_ai_turn:
            state.phase = GamePhase.AWAITING_MOVE
            self._emit_phase(GamePhase.AWAITING_MOVE)
            return

        state.phase = GamePhase.THINKING
        self._emit_phase(GamePhase.THINKING)
        color = state.current_player

        if not self._synchronous_ai:
            self._emit_ai_turn()
            return

        assert self._opponent is not None
        move = self._opponent.choose_move(state.position, color)
        if move is None:
            _LOGGER.info("%s has no legal moves", color)
            return
        self._play(move)

    def _emit_move(self, record: MoveRecord) -> None:
        for cb in self.events.on_move:
            cb(record, self._state)

    def _emit_game_over(self, result: GameResult) -> None:
        self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _emit_ai_turn(self) -> None:
        state = self._state
        for cb in self.events.on_ai_turn:
            cb(state.position.copy(), state.current_player)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
