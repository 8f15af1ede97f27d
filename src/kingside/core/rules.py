"""High-level chess rules: check, checkmate, stalemate, result."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kingside.core.enums import Color, GameResult
from kingside.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from kingside.core.position import Position


class Rules:
    """Static rule-checker for the side *color* in a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position, color: Color) -> bool:
        return MoveGenerator(position).is_in_check(color)

    @staticmethod
    def is_checkmate(position: Position, color: Color) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(color) and not gen.has_legal_moves(color)

    @staticmethod
    def is_stalemate(position: Position, color: Color) -> bool:
        gen = MoveGenerator(position)
        return not gen.is_in_check(color) and not gen.has_legal_moves(color)

    @staticmethod
    def game_result(position: Position, color: Color) -> GameResult:
        """Result of the game with *color* to move."""
        gen = MoveGenerator(position)
        if gen.has_legal_moves(color):
            return GameResult.IN_PROGRESS
        if gen.is_in_check(color):
            return GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS
        return GameResult.DRAW
