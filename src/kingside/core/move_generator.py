"""Pseudo-legal and legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kingside.core.enums import Color, PieceType
from kingside.core.move import Move
from kingside.core.piece import Piece
from kingside.core.types import ALL_SQUARES, Square, is_valid_square

if TYPE_CHECKING:
    from kingside.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = ROOK_DIRS + BISHOP_DIRS

_PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for row, col in ALL_SQUARES:
        targets[(row, col)] = tuple(
            (row + dr, col + dc)
            for dr, dc in offsets
            if is_valid_square(row + dr, col + dc)
        )
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[tuple[Square, ...], ...]]:
    rays_per_square: dict[Square, tuple[tuple[Square, ...], ...]] = {}
    for row, col in ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for dr, dc in directions:
            r, c = row + dr, col + dc
            ray: list[Square] = []
            while is_valid_square(r, c):
                ray.append((r, c))
                r += dr
                c += dc
            square_rays.append(tuple(ray))
        rays_per_square[(row, col)] = tuple(square_rays)
    return rays_per_square


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS: dict[PieceType, dict[Square, tuple[tuple[Square, ...], ...]]] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}
_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_ORTHOGONAL_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


class MoveGenerator:
    """Generates moves and attack information for a :class:`Position`.

    Legality probing mutates the board provisionally but always restores
    the exact prior contents before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, piece: Piece) -> set[Square]:
        """Destinations of *piece* that do not leave its own king attacked."""
        return {
            to_sq
            for to_sq in self.pseudo_legal_moves(piece)
            if self._keeps_king_safe(piece, to_sq)
        }

    def all_legal_moves(self, color: Color) -> list[Move]:
        """Every legal move of *color*, in board order."""
        moves: list[Move] = []
        for piece in self._board.pieces(color):
            origin = piece.position
            for to_sq in sorted(self.legal_moves(piece)):
                moves.append(Move(origin, to_sq))
        return moves

    def has_legal_moves(self, color: Color) -> bool:
        return any(self.legal_moves(piece) for piece in self._board.pieces(color))

    def pseudo_legal_moves(self, piece: Piece) -> set[Square]:
        """Destinations allowed by *piece*'s movement pattern (may self-check)."""
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            return self._gen_pawn(piece)
        if ptype == PieceType.KNIGHT:
            return self._gen_stepper(piece, _KNIGHT_TARGETS)
        if ptype == PieceType.KING:
            return self._gen_king(piece)
        return self._gen_sliding(piece, _SLIDER_RAYS[ptype])

    # -- Attack detection (public) -----------------------------------------

    def attack_squares(self, piece: Piece) -> set[Square]:
        """Squares *piece* attacks, regardless of what stands on them."""
        sq = piece.position
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            row = sq[0] + piece.color.forward
            return {
                (row, col)
                for col in (sq[1] - 1, sq[1] + 1)
                if is_valid_square(row, col)
            }
        if ptype == PieceType.KNIGHT:
            return set(_KNIGHT_TARGETS[sq])
        if ptype == PieceType.KING:
            return set(_KING_TARGETS[sq])

        board = self._board
        attacked: set[Square] = set()
        for ray in _SLIDER_RAYS[ptype][sq]:
            for to_sq in ray:
                attacked.add(to_sq)
                if not board.is_empty(to_sq):
                    break
        return attacked

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* in the attack set of any piece of *by_color*?

        Looks outward from *sq* instead of enumerating every attacker; the
        answer is the same as testing each piece's :meth:`attack_squares`.
        """
        board = self._board

        pawn_row = sq[0] - by_color.forward
        for col in (sq[1] - 1, sq[1] + 1):
            if is_valid_square(pawn_row, col):
                p = board[(pawn_row, col)]
                if p is not None and p.color == by_color and p.piece_type == PieceType.PAWN:
                    return True

        for from_sq in _KNIGHT_TARGETS[sq]:
            p = board[from_sq]
            if p is not None and p.color == by_color and p.piece_type == PieceType.KNIGHT:
                return True

        for from_sq in _KING_TARGETS[sq]:
            p = board[from_sq]
            if p is not None and p.color == by_color and p.piece_type == PieceType.KING:
                return True

        if self._ray_hits(_BISHOP_RAYS[sq], by_color, _DIAGONAL_ATTACKERS):
            return True
        return self._ray_hits(_ROOK_RAYS[sq], by_color, _ORTHOGONAL_ATTACKERS)

    def _ray_hits(
        self,
        rays: tuple[tuple[Square, ...], ...],
        by_color: Color,
        attackers: tuple[PieceType, ...],
    ) -> bool:
        board = self._board
        for ray in rays:
            for from_sq in ray:
                p = board[from_sq]
                if p is None:
                    continue
                if p.color == by_color and p.piece_type in attackers:
                    return True
                break
        return False

    # -- Legality probe ----------------------------------------------------

    def _keeps_king_safe(self, piece: Piece, to_sq: Square) -> bool:
        board = self._board
        origin = piece.position

        capture_sq = to_sq
        if (
            piece.piece_type == PieceType.PAWN
            and to_sq[1] != origin[1]
            and board.is_empty(to_sq)
        ):
            capture_sq = (origin[0], to_sq[1])  # en passant
        captured = board[capture_sq]

        board[capture_sq] = None
        board[origin] = None
        board[to_sq] = piece
        try:
            if piece.piece_type == PieceType.KING:
                king_sq = to_sq
            else:
                king_sq = board.king_square(piece.color)
            return not self.is_square_attacked(king_sq, piece.color.opposite)
        finally:
            board[to_sq] = None
            board[origin] = piece
            if captured is not None:
                board[capture_sq] = captured

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, piece: Piece) -> set[Square]:
        board = self._board
        row, col = piece.position
        color = piece.color
        step = color.forward
        moves: set[Square] = set()

        next_row = row + step
        if not 0 <= next_row < 8:
            return moves

        if board.is_empty((next_row, col)):
            moves.add((next_row, col))
            two_step = (row + 2 * step, col)
            if row == _PAWN_START_ROW[color] and board.is_empty(two_step):
                moves.add(two_step)

        en_passant = self._pos.en_passant
        for cap_col in (col - 1, col + 1):
            if not 0 <= cap_col < 8:
                continue
            cap_sq = (next_row, cap_col)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    moves.add(cap_sq)
            elif (
                en_passant is not None
                and en_passant.square == cap_sq
                and en_passant.color == color.opposite
            ):
                moves.add(cap_sq)
        return moves

    def _gen_stepper(
        self,
        piece: Piece,
        targets: dict[Square, tuple[Square, ...]],
    ) -> set[Square]:
        board = self._board
        moves: set[Square] = set()
        for to_sq in targets[piece.position]:
            target = board[to_sq]
            if target is None or target.color != piece.color:
                moves.add(to_sq)
        return moves

    def _gen_sliding(
        self,
        piece: Piece,
        rays: dict[Square, tuple[tuple[Square, ...], ...]],
    ) -> set[Square]:
        board = self._board
        moves: set[Square] = set()
        for ray in rays[piece.position]:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.add(to_sq)
                    continue
                if target.color != piece.color:
                    moves.add(to_sq)
                break
        return moves

    def _gen_king(self, king: Piece) -> set[Square]:
        opponent = king.color.opposite
        moves = {
            to_sq
            for to_sq in self._gen_stepper(king, _KING_TARGETS)
            if not self.is_square_attacked(to_sq, opponent)
        }
        moves |= self._gen_castling(king)
        return moves

    def _gen_castling(self, king: Piece) -> set[Square]:
        color = king.color
        row = color.home_row
        rights = self._pos.castling[color]
        moves: set[Square] = set()

        if rights.king_moved or king.position != (row, 4):
            return moves

        opponent = color.opposite
        if self.is_square_attacked((row, 4), opponent):
            return moves

        board = self._board
        if (
            not rights.rook_moved_right
            and board.is_empty((row, 5))
            and board.is_empty((row, 6))
            and not self.is_square_attacked((row, 5), opponent)
            and not self.is_square_attacked((row, 6), opponent)
            and self._is_own_rook((row, 7), color)
        ):
            moves.add((row, 6))

        if (
            not rights.rook_moved_left
            and board.is_empty((row, 1))
            and board.is_empty((row, 2))
            and board.is_empty((row, 3))
            and not self.is_square_attacked((row, 3), opponent)
            and not self.is_square_attacked((row, 2), opponent)
            and self._is_own_rook((row, 0), color)
        ):
            moves.add((row, 2))
        return moves

    def _is_own_rook(self, sq: Square, color: Color) -> bool:
        p = self._board[sq]
        return p is not None and p.color == color and p.piece_type == PieceType.ROOK
