"""Square type alias and coordinate helpers.

Board layout: a square is a ``(row, col)`` pair.
    row 0 is white's back rank (rank 1), row 7 black's (rank 8)
    col 0 is the a-file, col 7 the h-file
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = tuple[int, int]


def is_valid_square(row: int, col: int) -> bool:
    """Check whether the coordinates lie on the board."""
    return 0 <= row < 8 and 0 <= col < 8


def make_square(row: int, col: int) -> Square:
    """Create a square, rejecting coordinates off the board."""
    if not is_valid_square(row, col):
        raise ValueError(f"Square out of bounds: ({row}, {col})")
    return (row, col)


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. (0, 4) → 'e1'."""
    return chr(ord("a") + sq[1]) + str(sq[0] + 1)


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → (3, 4)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return (int(name[1]) - 1, ord(name[0]) - ord("a"))


ALL_SQUARES: tuple[Square, ...] = tuple((r, c) for r in range(8) for c in range(8))

# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = ((0, c) for c in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = ((1, c) for c in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = ((2, c) for c in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = ((3, c) for c in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = ((4, c) for c in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = ((5, c) for c in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = ((6, c) for c in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = ((7, c) for c in range(8))
