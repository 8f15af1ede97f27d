"""Opponent strategies: random, greedy capture and minimax."""

from __future__ import annotations

import logging
import random

from kingside.core.enums import Color
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.position import Position
from kingside.engine.search import MATE_SCORE, Difficulty, IOpponent, SearchLimits

_LOGGER = logging.getLogger(__name__)
_INF_SCORE = 1_000_000


class RandomOpponent(IOpponent):
    """Plays any legal move with equal probability."""

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def choose_move(self, position: Position, color: Color) -> Move | None:
        moves = MoveGenerator(position).all_legal_moves(color)
        if not moves:
            return None
        return self._rng.choice(moves)


class CaptureGreedyOpponent(IOpponent):
    """Takes the most valuable piece available, otherwise plays at random."""

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def choose_move(self, position: Position, color: Color) -> Move | None:
        moves = MoveGenerator(position).all_legal_moves(color)
        if not moves:
            return None

        scored: list[tuple[Move, int]] = []
        for move in moves:
            captured = position.captured_piece(move)
            scored.append((move, captured.value if captured is not None else 0))

        best_score = max(score for _, score in scored)
        if best_score > 0:
            captures = [move for move, score in scored if score == best_score]
            return self._rng.choice(captures)
        return self._rng.choice(moves)


class MinimaxOpponent(IOpponent):
    """Fixed-depth minimax over material with noisy leaves.

    The evaluating color is passed down explicitly; the search never reads
    whose turn the game thinks it is.
    """

    __slots__ = ("_rng", "_limits", "_nodes")

    def __init__(
        self,
        rng: random.Random | None = None,
        limits: SearchLimits | None = None,
    ) -> None:
        self._limits = limits or SearchLimits()
        if self._limits.max_depth <= 0:
            raise ValueError("Search depth must be >= 1")
        self._rng = rng or random.Random()
        self._nodes = 0

    @property
    def nodes(self) -> int:
        """Nodes visited by the last :meth:`choose_move`."""
        return self._nodes

    def choose_move(self, position: Position, color: Color) -> Move | None:
        self._nodes = 0
        root_moves = MoveGenerator(position).all_legal_moves(color)
        if not root_moves:
            return None

        best_score = -_INF_SCORE
        best_moves: list[Move] = []
        for move in root_moves:
            position.make_move(move)
            try:
                score = self._minimax(
                    position,
                    self._limits.max_depth - 1,
                    color.opposite,
                    color,
                )
            finally:
                position.unmake_move()

            if score > best_score:
                best_score = score
                best_moves = [move]
            elif score == best_score:
                best_moves.append(move)

        choice = self._rng.choice(best_moves)
        _LOGGER.debug(
            "minimax picked %s (score %d, %d tied, %d nodes)",
            choice,
            best_score,
            len(best_moves),
            self._nodes,
        )
        return choice

    def _minimax(
        self,
        position: Position,
        depth: int,
        to_move: Color,
        perspective: Color,
    ) -> int:
        self._nodes += 1
        if depth == 0:
            return self._evaluate(position, perspective)

        gen = MoveGenerator(position)
        moves = gen.all_legal_moves(to_move)
        if not moves:
            if gen.is_in_check(to_move):
                return -MATE_SCORE if to_move == perspective else MATE_SCORE
            return 0

        maximizing = to_move == perspective
        best = -_INF_SCORE if maximizing else _INF_SCORE
        for move in moves:
            position.make_move(move)
            try:
                score = self._minimax(position, depth - 1, to_move.opposite, perspective)
            finally:
                position.unmake_move()
            best = max(best, score) if maximizing else min(best, score)
        return best

    def _evaluate(self, position: Position, perspective: Color) -> int:
        total = 0
        for piece in position.board:
            total += piece.value if piece.color == perspective else -piece.value
        noise = self._limits.noise
        if noise:
            total += int(total * self._rng.uniform(-noise, noise))
        return total


def opponent_for(
    difficulty: Difficulty,
    rng: random.Random | None = None,
    limits: SearchLimits | None = None,
) -> IOpponent:
    """Build the opponent strategy for *difficulty*."""
    if difficulty == Difficulty.EASY:
        return RandomOpponent(rng)
    if difficulty == Difficulty.MEDIUM:
        return CaptureGreedyOpponent(rng)
    return MinimaxOpponent(rng, limits)
