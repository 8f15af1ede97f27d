"""Position — board plus castling rights and en passant target, with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from kingside.core.board import Board, InvariantViolationError
from kingside.core.enums import Color, MoveFlag, PieceType
from kingside.core.move import Move
from kingside.core.piece import Piece
from kingside.core.types import Square


@dataclass(slots=True)
class CastlingRights:
    """Castling bookkeeping for one side. Flags are only ever set, never reset."""

    king_moved: bool = False
    rook_moved_left: bool = False  # a-file rook (queenside)
    rook_moved_right: bool = False  # h-file rook (kingside)

    def copy(self) -> CastlingRights:
        return replace(self)

    @classmethod
    def lost(cls) -> CastlingRights:
        """Rights for a side that can no longer castle at all."""
        return cls(king_moved=True, rook_moved_left=True, rook_moved_right=True)


@dataclass(frozen=True, slots=True)
class EnPassantTarget:
    """Square skipped by the last double pawn step, and that pawn's color."""

    square: Square
    color: Color


CastlingTable = dict[Color, CastlingRights]


def _fresh_castling() -> CastlingTable:
    return {Color.WHITE: CastlingRights(), Color.BLACK: CastlingRights()}


def _copy_castling(castling: CastlingTable) -> CastlingTable:
    return {color: rights.copy() for color, rights in castling.items()}


@dataclass(slots=True)
class _UndoState:
    """Everything needed to revert one :meth:`Position.apply_move`."""

    move: Move
    flag: MoveFlag
    piece: Piece
    had_moved: bool
    castling: CastlingTable
    en_passant: EnPassantTarget | None
    captured: Piece | None = None
    capture_sq: Square | None = None
    rook: Piece | None = None
    rook_had_moved: bool = False


@dataclass(frozen=True, slots=True)
class PositionSnapshot:
    """Full copy of a position, stored in the game history."""

    board: Board
    castling: CastlingTable = field(default_factory=_fresh_castling)
    en_passant: EnPassantTarget | None = None


class Position:
    """Board + castling rights + en passant target.

    :meth:`apply_move` performs every side effect of a move and returns an
    undo record; :meth:`make_move` / :meth:`unmake_move` wrap it with an
    internal stack for scratch search (Command pattern). Every ``make_move``
    must be paired with an ``unmake_move`` before control returns upward.
    """

    __slots__ = ("board", "castling", "en_passant", "_history")

    def __init__(
        self,
        board: Board | None = None,
        castling: CastlingTable | None = None,
        en_passant: EnPassantTarget | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.castling = castling if castling is not None else _fresh_castling()
        self.en_passant = en_passant
        self._history: list[_UndoState] = []

    # ── Classification ───────────────────────────────────────────────────

    def classify(self, move: Move) -> MoveFlag:
        """Which special rule (if any) *move* triggers in this position."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        (fr, fc), (tr, tc) = move.from_sq, move.to_sq
        if piece.piece_type == PieceType.KING and abs(tc - fc) == 2:
            return MoveFlag.CASTLE_KINGSIDE if tc == 6 else MoveFlag.CASTLE_QUEENSIDE
        if piece.piece_type == PieceType.PAWN:
            if tr == piece.color.opposite.home_row:
                return MoveFlag.PROMOTION
            if abs(tr - fr) == 2:
                return MoveFlag.DOUBLE_PAWN
            if tc != fc and self.board.is_empty(move.to_sq):
                return MoveFlag.EN_PASSANT
        return MoveFlag.NORMAL

    def captured_piece(self, move: Move) -> Piece | None:
        """Piece removed by *move*, including a pawn taken en passant."""
        if self.classify(move) == MoveFlag.EN_PASSANT:
            return self.board[(move.from_sq[0], move.to_sq[1])]
        return self.board[move.to_sq]

    # ── Core move operations ─────────────────────────────────────────────

    def apply_move(
        self,
        move: Move,
        promotion: PieceType | None = PieceType.QUEEN,
    ) -> _UndoState:
        """Apply *move* with all side effects and return its undo record.

        ``promotion=None`` leaves a pawn that reaches the last rank as a pawn,
        for a caller that resolves the choice later.
        """
        flag = self.classify(move)
        board = self.board
        piece = board[move.from_sq]
        assert piece is not None

        state = _UndoState(
            move=move,
            flag=flag,
            piece=piece,
            had_moved=piece.has_moved,
            castling=_copy_castling(self.castling),
            en_passant=self.en_passant,
        )

        # Rook co-move
        if flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE):
            row = move.from_sq[0]
            rook_from, rook_to = _rook_squares(row, flag)
            rook = board[rook_from]
            if rook is None:
                raise InvariantViolationError(f"Castling without a rook on {rook_from}")
            state.rook = rook
            state.rook_had_moved = rook.has_moved
            board[rook_from] = None
            board[rook_to] = rook
            rook.has_moved = True

        # Captured piece (sits beside the destination for en passant)
        capture_sq = move.to_sq
        if flag == MoveFlag.EN_PASSANT:
            capture_sq = (move.from_sq[0], move.to_sq[1])
        captured = board[capture_sq]
        if captured is not None:
            state.captured = captured
            state.capture_sq = capture_sq
            board[capture_sq] = None

        # En passant target for the opponent
        self.en_passant = None
        if flag == MoveFlag.DOUBLE_PAWN:
            skipped = ((move.from_sq[0] + move.to_sq[0]) // 2, move.from_sq[1])
            self.en_passant = EnPassantTarget(skipped, piece.color)

        placed = piece
        if flag == MoveFlag.PROMOTION and promotion is not None:
            placed = Piece(piece.color, promotion)

        board[move.from_sq] = None
        board[move.to_sq] = placed
        placed.has_moved = True

        self._update_castling(move, piece, captured, capture_sq)
        return state

    def make_move(self, move: Move, promotion: PieceType | None = PieceType.QUEEN) -> None:
        """Apply *move*, pushing undo state onto the history stack."""
        self._history.append(self.apply_move(move, promotion))

    def unmake_move(self) -> None:
        """Undo the last :meth:`make_move`."""
        if not self._history:
            raise InvariantViolationError("unmake_move without a matching make_move")
        self._revert(self._history.pop())

    def _revert(self, state: _UndoState) -> None:
        board = self.board
        move = state.move

        board[move.to_sq] = None
        state.piece.has_moved = state.had_moved
        board[move.from_sq] = state.piece

        if state.captured is not None:
            assert state.capture_sq is not None
            board[state.capture_sq] = state.captured

        if state.rook is not None:
            rook_from, rook_to = _rook_squares(move.from_sq[0], state.flag)
            board[rook_to] = None
            board[rook_from] = state.rook
            state.rook.has_moved = state.rook_had_moved

        self.castling = state.castling
        self.en_passant = state.en_passant

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(
        self,
        move: Move,
        piece: Piece,
        captured: Piece | None,
        capture_sq: Square,
    ) -> None:
        rights = self.castling[piece.color]
        if piece.piece_type == PieceType.KING:
            rights.king_moved = True
        elif piece.piece_type == PieceType.ROOK:
            _mark_rook_corner(rights, piece.color, move.from_sq)

        if captured is not None and captured.piece_type == PieceType.ROOK:
            _mark_rook_corner(self.castling[captured.color], captured.color, capture_sq)

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> PositionSnapshot:
        return PositionSnapshot(
            board=self.board.copy(),
            castling=_copy_castling(self.castling),
            en_passant=self.en_passant,
        )

    def restore(self, snapshot: PositionSnapshot) -> None:
        """Replace the whole state with a copy of *snapshot*."""
        self.board = snapshot.board.copy()
        self.castling = _copy_castling(snapshot.castling)
        self.en_passant = snapshot.en_passant
        self._history.clear()

    def copy(self) -> Position:
        """Deep copy without history."""
        return Position(
            board=self.board.copy(),
            castling=_copy_castling(self.castling),
            en_passant=self.en_passant,
        )


def _rook_squares(row: int, flag: MoveFlag) -> tuple[Square, Square]:
    if flag == MoveFlag.CASTLE_KINGSIDE:
        return (row, 7), (row, 5)
    return (row, 0), (row, 3)


def _mark_rook_corner(rights: CastlingRights, color: Color, sq: Square) -> None:
    if sq[0] != color.home_row:
        return
    if sq[1] == 0:
        rights.rook_moved_left = True
    elif sq[1] == 7:
        rights.rook_moved_right = True
