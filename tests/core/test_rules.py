"""Tests for the check / checkmate / stalemate queries."""

from kingside.core.board import Board
from kingside.core.enums import Color, GameResult
from kingside.core.move import Move
from kingside.core.position import Position
from kingside.core.rules import Rules
from kingside.core.types import parse_square


def _play(pos: Position, *names: str) -> None:
    for name in names:
        pos.make_move(Move(parse_square(name[:2]), parse_square(name[2:])))


class TestCheck:
    def test_start_position_no_check(self) -> None:
        pos = Position()
        assert not Rules.is_in_check(pos, Color.WHITE)
        assert not Rules.is_in_check(pos, Color.BLACK)

    def test_rook_check(self) -> None:
        pos = Position(Board.from_diagram("""
            . . . . k . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . R . K .
        """))
        assert Rules.is_in_check(pos, Color.BLACK)
        assert not Rules.is_in_check(pos, Color.WHITE)

    def test_blocked_rook_does_not_check(self) -> None:
        pos = Position(Board.from_diagram("""
            . . . . k . . .
            . . . . p . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . R . K .
        """))
        assert not Rules.is_in_check(pos, Color.BLACK)


class TestCheckmate:
    def test_fools_mate(self) -> None:
        pos = Position()
        _play(pos, "f2f3", "e7e5", "g2g4", "d8h4")
        assert Rules.is_checkmate(pos, Color.WHITE)
        assert not Rules.is_stalemate(pos, Color.WHITE)
        assert Rules.game_result(pos, Color.WHITE) == GameResult.BLACK_WINS

    def test_back_rank_mate(self) -> None:
        pos = Position(Board.from_diagram("""
            R . . . . . k .
            . . . . . p p p
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . K .
        """))
        assert Rules.is_checkmate(pos, Color.BLACK)
        assert Rules.game_result(pos, Color.BLACK) == GameResult.WHITE_WINS

    def test_check_with_escape_is_not_mate(self) -> None:
        pos = Position(Board.from_diagram("""
            R . . . . . k .
            . . . . . p p .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . K .
        """))
        assert Rules.is_in_check(pos, Color.BLACK)
        assert not Rules.is_checkmate(pos, Color.BLACK)
        assert Rules.game_result(pos, Color.BLACK) == GameResult.IN_PROGRESS


class TestStalemate:
    def test_king_and_queen_stalemate(self) -> None:
        pos = Position(Board.from_diagram("""
            . . . . . . . k
            . . . . . K . .
            . . . . . . Q .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
        """))
        assert Rules.is_stalemate(pos, Color.BLACK)
        assert not Rules.is_checkmate(pos, Color.BLACK)
        assert Rules.game_result(pos, Color.BLACK) == GameResult.DRAW

    def test_start_position_in_progress(self) -> None:
        assert Rules.game_result(Position(), Color.WHITE) == GameResult.IN_PROGRESS
