"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from kingside.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable (origin, destination) pair.

    The moving piece is whatever stands on ``from_sq``; castling, en passant
    and promotion are side effects derived from the position when the move is
    applied.
    """

    from_sq: Square
    to_sq: Square

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
