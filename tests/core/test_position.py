"""Tests for Position: move classification, side effects and make/unmake."""

import pytest

from kingside.core.board import Board, InvariantViolationError
from kingside.core.enums import Color, MoveFlag, PieceType
from kingside.core.move import Move
from kingside.core.position import CastlingRights, EnPassantTarget, Position
from kingside.core.types import (
    A1, A8, C1, D1, D5, D6, E1, E2, E3, E4, E5, E7, E8, F1, G1, H1, H8,
    parse_square,
)

CASTLE_READY = """
r . . . k . . r
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
R . . . K . . R
"""

EN_PASSANT_READY = """
. . . . k . . .
. . . . . . . .
. . . . . . . .
. . . p P . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . K . . .
"""

PROMOTION_READY = """
. . . r . . . k
. . . . P . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . . . . .
. . . . K . . .
"""


def _position(diagram: str, **kwargs) -> Position:
    return Position(Board.from_diagram(diagram), **kwargs)


def _assert_round_trip(pos: Position, move: Move) -> None:
    board_before = pos.board.copy()
    castling_before = {c: r.copy() for c, r in pos.castling.items()}
    ep_before = pos.en_passant

    pos.make_move(move)
    assert pos.board != board_before
    pos.unmake_move()

    assert pos.board == board_before
    assert pos.castling == castling_before
    assert pos.en_passant == ep_before


# ── classify ─────────────────────────────────────────────────────────────────


class TestClassify:
    def test_normal(self) -> None:
        assert Position().classify(Move(parse_square("g1"), parse_square("f3"))) == MoveFlag.NORMAL

    def test_double_pawn(self) -> None:
        assert Position().classify(Move(E2, E4)) == MoveFlag.DOUBLE_PAWN

    def test_castles(self) -> None:
        pos = _position(CASTLE_READY)
        assert pos.classify(Move(E1, G1)) == MoveFlag.CASTLE_KINGSIDE
        assert pos.classify(Move(E1, C1)) == MoveFlag.CASTLE_QUEENSIDE

    def test_en_passant(self) -> None:
        pos = _position(EN_PASSANT_READY, en_passant=EnPassantTarget(D6, Color.BLACK))
        assert pos.classify(Move(E5, D6)) == MoveFlag.EN_PASSANT

    def test_promotion(self) -> None:
        pos = _position(PROMOTION_READY)
        assert pos.classify(Move(E7, E8)) == MoveFlag.PROMOTION
        assert pos.classify(Move(E7, parse_square("d8"))) == MoveFlag.PROMOTION

    def test_empty_origin_rejected(self) -> None:
        with pytest.raises(ValueError):
            Position().classify(Move(E4, parse_square("e5")))


# ── apply_move side effects ─────────────────────────────────────────────────


class TestApplyMove:
    def test_double_step_sets_target(self) -> None:
        pos = Position()
        pos.make_move(Move(E2, E4))
        assert pos.en_passant == EnPassantTarget(E3, Color.WHITE)

    def test_target_cleared_by_next_move(self) -> None:
        pos = Position()
        pos.make_move(Move(E2, E4))
        pos.make_move(Move(parse_square("g8"), parse_square("f6")))
        assert pos.en_passant is None

    def test_moved_piece_is_flagged(self) -> None:
        pos = Position()
        pawn = pos.board[E2]
        pos.make_move(Move(E2, E4))
        assert pos.board[E4] is pawn
        assert pawn.has_moved
        assert pawn.position == E4

    def test_kingside_castle_moves_rook(self) -> None:
        pos = _position(CASTLE_READY)
        pos.make_move(Move(E1, G1))
        assert pos.board[G1].piece_type == PieceType.KING
        assert pos.board[F1].piece_type == PieceType.ROOK
        assert pos.board[H1] is None
        assert pos.castling[Color.WHITE].king_moved

    def test_queenside_castle_moves_rook(self) -> None:
        pos = _position(CASTLE_READY)
        pos.make_move(Move(E8, parse_square("c8")))
        assert pos.board[parse_square("c8")].piece_type == PieceType.KING
        assert pos.board[parse_square("d8")].piece_type == PieceType.ROOK
        assert pos.board[A8] is None

    def test_en_passant_removes_passed_pawn(self) -> None:
        pos = _position(EN_PASSANT_READY, en_passant=EnPassantTarget(D6, Color.BLACK))
        captured = pos.captured_piece(Move(E5, D6))
        assert captured is pos.board[D5]
        pos.make_move(Move(E5, D6))
        assert pos.board[D5] is None
        assert pos.board[D6].piece_type == PieceType.PAWN

    def test_promotion_defaults_to_queen(self) -> None:
        pos = _position(PROMOTION_READY)
        pos.make_move(Move(E7, E8))
        promoted = pos.board[E8]
        assert promoted.piece_type == PieceType.QUEEN
        assert promoted.color == Color.WHITE

    def test_promotion_none_leaves_pawn(self) -> None:
        pos = _position(PROMOTION_READY)
        pos.make_move(Move(E7, E8), promotion=None)
        assert pos.board[E8].piece_type == PieceType.PAWN

    def test_rook_move_loses_one_side(self) -> None:
        pos = _position(CASTLE_READY)
        pos.make_move(Move(H1, parse_square("h2")))
        rights = pos.castling[Color.WHITE]
        assert rights.rook_moved_right
        assert not rights.rook_moved_left
        assert not rights.king_moved

    def test_capturing_corner_rook_marks_owner(self) -> None:
        pos = _position(CASTLE_READY)
        pos.make_move(Move(A1, A8))
        assert pos.castling[Color.BLACK].rook_moved_left
        assert not pos.castling[Color.BLACK].rook_moved_right
        assert pos.castling[Color.WHITE].rook_moved_left

    def test_castling_without_rook_is_an_invariant_violation(self) -> None:
        pos = _position(CASTLE_READY)
        pos.board[H1] = None
        with pytest.raises(InvariantViolationError):
            pos.apply_move(Move(E1, G1))


# ── make / unmake ────────────────────────────────────────────────────────────


class TestMakeUnmake:
    def test_quiet_move(self) -> None:
        _assert_round_trip(Position(), Move(parse_square("g1"), parse_square("f3")))

    def test_double_step(self) -> None:
        _assert_round_trip(Position(), Move(E2, E4))

    @pytest.mark.parametrize("to_sq", [G1, C1])
    def test_castling(self, to_sq) -> None:
        _assert_round_trip(_position(CASTLE_READY), Move(E1, to_sq))

    def test_en_passant(self) -> None:
        pos = _position(EN_PASSANT_READY, en_passant=EnPassantTarget(D6, Color.BLACK))
        _assert_round_trip(pos, Move(E5, D6))

    @pytest.mark.parametrize("to_name", ["e8", "d8"])
    def test_promotion(self, to_name: str) -> None:
        _assert_round_trip(_position(PROMOTION_READY), Move(E7, parse_square(to_name)))

    def test_capture_of_corner_rook(self) -> None:
        _assert_round_trip(_position(CASTLE_READY), Move(H1, H8))

    def test_restores_piece_identity(self) -> None:
        pos = _position(CASTLE_READY)
        king, rook = pos.board[E1], pos.board[H1]
        pos.make_move(Move(E1, G1))
        pos.unmake_move()
        assert pos.board[E1] is king
        assert pos.board[H1] is rook
        assert not king.has_moved and not rook.has_moved

    def test_nested(self) -> None:
        pos = Position()
        before = pos.board.copy()
        moves = [Move(E2, E4), Move(E7, parse_square("e5")), Move(D1, parse_square("h5"))]
        for move in moves:
            pos.make_move(move)
        for _ in moves:
            pos.unmake_move()
        assert pos.board == before
        assert pos.en_passant is None

    def test_unmatched_unmake_raises(self) -> None:
        with pytest.raises(InvariantViolationError):
            Position().unmake_move()


# ── Snapshots ────────────────────────────────────────────────────────────────


class TestSnapshot:
    def test_restore_returns_to_snapshot(self) -> None:
        pos = Position()
        snap = pos.snapshot()
        pos.make_move(Move(E2, E4))
        pos.restore(snap)
        assert pos.board == Board.initial()
        assert pos.en_passant is None

    def test_snapshot_is_independent(self) -> None:
        pos = Position()
        snap = pos.snapshot()
        pos.make_move(Move(E2, E4))
        assert snap.board == Board.initial()

    def test_restore_does_not_alias_snapshot(self) -> None:
        pos = Position()
        snap = pos.snapshot()
        pos.restore(snap)
        pos.make_move(Move(E2, E4))
        assert snap.board == Board.initial()

    def test_copy_keeps_rights_and_target(self) -> None:
        castling = {Color.WHITE: CastlingRights.lost(), Color.BLACK: CastlingRights()}
        pos = _position(
            EN_PASSANT_READY,
            castling=castling,
            en_passant=EnPassantTarget(D6, Color.BLACK),
        )
        clone = pos.copy()
        assert clone.board == pos.board
        assert clone.castling == pos.castling
        assert clone.castling[Color.WHITE] is not pos.castling[Color.WHITE]
        assert clone.en_passant == pos.en_passant
