"""Game state machine — board, turn, status flags, selection and history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from kingside.core.board import Board
from kingside.core.enums import Color, GameResult, MoveFlag, PieceType
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.piece import Piece
from kingside.core.position import Position, PositionSnapshot
from kingside.core.rules import Rules
from kingside.core.types import Square, square_name
from kingside.game.interfaces import GamePhase, PendingPromotion

_LOGGER = logging.getLogger(__name__)

PROMOTION_CHOICES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    color: Color
    flag: MoveFlag
    captured: Piece | None = None
    promotion: PieceType | None = None
    was_check: bool = False

    @property
    def was_capture(self) -> bool:
        return self.captured is not None


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Position and side to move saved before a ply was applied."""

    position: PositionSnapshot
    current_player: Color


@dataclass
class GameState:
    """Authoritative state of one game.

    This is a pure data/logic class — no threading, no UI, no opponent.
    Callers validate moves against :attr:`legal_moves` before applying.
    """

    position: Position = field(default_factory=Position, init=False)
    current_player: Color = field(default=Color.WHITE, init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    is_in_check: bool = field(default=False, init=False)
    is_checkmate: bool = field(default=False, init=False)
    is_stalemate: bool = field(default=False, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    selected_piece: Piece | None = field(default=None, init=False)
    legal_moves: frozenset[Square] = field(default=frozenset(), init=False)
    pending_promotion: PendingPromotion | None = field(default=None, init=False)
    history: list[HistoryEntry] = field(default_factory=list, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(
        self,
        position: Position | None = None,
        current_player: Color = Color.WHITE,
    ) -> None:
        """Initialise (or reset) the game, by default from the start position."""
        self.position = position if position is not None else Position()
        self.current_player = current_player
        self.clear_selection()
        self.pending_promotion = None
        self.history.clear()
        self.move_history.clear()
        self.refresh_status()

    # ── Selection ────────────────────────────────────────────────────────

    def select(self, square: Square) -> bool:
        """Select the piece on *square*; no-op unless it is the mover's."""
        piece = self.position.board[square]
        if piece is None or piece.color != self.current_player:
            return False
        self.selected_piece = piece
        self.legal_moves = frozenset(MoveGenerator(self.position).legal_moves(piece))
        _LOGGER.debug(
            "selected %s on %s: %d legal moves",
            piece,
            square_name(square),
            len(self.legal_moves),
        )
        return True

    def clear_selection(self) -> None:
        self.selected_piece = None
        self.legal_moves = frozenset()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move, *, auto_promote: bool) -> MoveRecord:
        """Apply a validated move for :attr:`current_player`.

        With ``auto_promote`` a pawn reaching the last rank becomes a queen
        at once; otherwise the turn stops with :attr:`pending_promotion` set
        until :meth:`complete_promotion` is called.
        """
        self.history.append(
            HistoryEntry(self.position.snapshot(), self.current_player)
        )

        flag = self.position.classify(move)
        record = MoveRecord(
            move=move,
            color=self.current_player,
            flag=flag,
            captured=self.position.captured_piece(move),
        )

        promotion = PieceType.QUEEN if auto_promote else None
        self.position.apply_move(move, promotion)
        self.move_history.append(record)
        self.clear_selection()

        if flag == MoveFlag.PROMOTION:
            if promotion is None:
                self.pending_promotion = PendingPromotion(move.to_sq, self.current_player)
                self.phase = GamePhase.AWAITING_PROMOTION
                return record
            record.promotion = promotion

        self._end_turn()
        record.was_check = self.is_in_check
        return record

    def complete_promotion(self, piece_type: PieceType) -> bool:
        """Replace the pending pawn with *piece_type* and finish the turn."""
        pending = self.pending_promotion
        if pending is None:
            return False
        if piece_type not in PROMOTION_CHOICES:
            raise ValueError(f"Cannot promote to {piece_type.name.lower()}")

        self.position.board[pending.square] = Piece(
            pending.color, piece_type, has_moved=True
        )
        self.pending_promotion = None
        record = self.move_history[-1]
        record.promotion = piece_type

        self._end_turn()
        record.was_check = self.is_in_check
        return True

    def undo_last_move(self) -> bool:
        """Restore the position from before the last ply. False if none."""
        if not self.history:
            return False

        entry = self.history.pop()
        if self.move_history:
            self.move_history.pop()
        self.position.restore(entry.position)
        self.current_player = entry.current_player
        self.clear_selection()
        self.pending_promotion = None
        self.refresh_status()
        return True

    # ── Status ───────────────────────────────────────────────────────────

    def refresh_status(self) -> None:
        """Recompute check / checkmate / stalemate for the side to move."""
        position, player = self.position, self.current_player
        self.is_in_check = Rules.is_in_check(position, player)
        self.result = Rules.game_result(position, player)
        self.is_checkmate = self.result in (GameResult.WHITE_WINS, GameResult.BLACK_WINS)
        self.is_stalemate = self.result == GameResult.DRAW
        self.phase = (
            GamePhase.AWAITING_MOVE
            if self.result == GameResult.IN_PROGRESS
            else GamePhase.GAME_OVER
        )

    def _end_turn(self) -> None:
        self.current_player = self.current_player.opposite
        self.refresh_status()

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self.position.board

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_stalemate

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    def all_legal_moves(self) -> list[Move]:
        """Legal moves of the side to move."""
        return MoveGenerator(self.position).all_legal_moves(self.current_player)
