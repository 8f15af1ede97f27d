"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from kingside.core import Color, MoveGenerator, Position

    pos = Position()
    gen = MoveGenerator(pos)
    for move in gen.all_legal_moves(Color.WHITE):
        print(move)
"""

from kingside.core.board import Board, InvariantViolationError
from kingside.core.enums import Color, GameResult, MoveFlag, PieceType
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.piece import PIECE_VALUES, Piece
from kingside.core.position import (
    CastlingRights,
    EnPassantTarget,
    Position,
    PositionSnapshot,
)
from kingside.core.rules import Rules
from kingside.core.types import (
    Square,
    make_square,
    parse_square,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Types / helpers
    "Square",
    "make_square",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "CastlingRights",
    "EnPassantTarget",
    "InvariantViolationError",
    "Move",
    "MoveGenerator",
    "PIECE_VALUES",
    "Piece",
    "Position",
    "PositionSnapshot",
    "Rules",
]
