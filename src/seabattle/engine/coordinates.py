"""Grid coordinates and the single bounds check for the 10×10 board."""

from __future__ import annotations

from dataclasses import dataclass

BOARD_SIZE = 10


@dataclass(frozen=True)
class Position:
    """Immutable board coordinate."""

    row: int
    col: int


def is_position_valid(row: int, col: int) -> bool:
    """Check whether ``(row, col)`` lies inside the board boundaries."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def all_positions() -> list[Position]:
    """Return every board position in row-major order."""
    return [Position(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)]
