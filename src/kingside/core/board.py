"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from kingside.core.enums import Color, PieceType
from kingside.core.piece import Piece
from kingside.core.types import Square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class InvariantViolationError(RuntimeError):
    """Board or position state is corrupted (e.g. a king is missing)."""


class Board:
    """Mutable 8x8 board owning every piece placed on it.

    Assigning a piece to a square updates the piece's ``position`` so the
    grid and the pieces can never disagree.
    """

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._grid[sq[0]][sq[1]]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        row, col = sq
        if piece is not None:
            piece.position = (row, col)
        self._grid[row][col] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._grid[sq[0]][sq[1]] is None

    # -- Query helpers ------------------------------------------------------

    def __iter__(self) -> Iterator[Piece]:
        """Occupied squares' pieces, row by row from a1."""
        for row in self._grid:
            for piece in row:
                if piece is not None:
                    yield piece

    def pieces(self, color: Color) -> list[Piece]:
        """All pieces of *color*."""
        return [p for p in self if p.color == color]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        for piece in self:
            if piece.piece_type == PieceType.KING and piece.color == color:
                return piece.position
        raise InvariantViolationError(f"invariant violation: no {color} king found")

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [[p.copy() if p is not None else None for p in row] for row in self._grid]
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for col in range(8):
            b[(1, col)] = Piece(Color.WHITE, PieceType.PAWN)
            b[(6, col)] = Piece(Color.BLACK, PieceType.PAWN)
        for col, pt in enumerate(_BACK_RANK):
            b[(0, col)] = Piece(Color.WHITE, pt)
            b[(7, col)] = Piece(Color.BLACK, pt)
        return b

    @classmethod
    def from_diagram(cls, diagram: str) -> Board:
        """Build a board from eight text rows, rank 8 first.

        Each row holds eight characters: piece letters (uppercase white) or
        ``.`` for an empty square. Whitespace inside a row is ignored::

            Board.from_diagram('''
                . . . . k . . .
                . . . . . . . .
                ...
                . . . . K . . R
            ''')
        """
        rows = ["".join(line.split()) for line in diagram.strip().splitlines()]
        rows = [r for r in rows if r]
        if len(rows) != 8 or any(len(r) != 8 for r in rows):
            raise ValueError("Diagram must have 8 rows of 8 squares")

        b = cls()
        for i, text in enumerate(rows):
            row = 7 - i
            for col, char in enumerate(text):
                if char != ".":
                    b[make_square(row, col)] = Piece.from_char(char)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(7, -1, -1):
            cells = []
            for col in range(8):
                p = self._grid[row][col]
                cells.append(str(p) if p else ".")
            rows.append(f"{row + 1} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
