"""Cell grid owned by a single player."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .coordinates import BOARD_SIZE, Position, is_position_valid

logger = logging.getLogger(__name__)


class CellStatus(Enum):
    """State of a single board cell."""

    EMPTY = "empty"
    SHIP = "ship"
    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"


@dataclass
class Cell:
    """One square of water, possibly holding part of a ship."""

    position: Position
    status: CellStatus = CellStatus.EMPTY
    occupant_id: str | None = None


@dataclass
class Board:
    """Represents a player's 10×10 grid of cells."""

    grid: list[list[Cell]]

    @property
    def size(self) -> int:
        return len(self.grid)

    def cell(self, position: Position) -> Cell:
        """Return the cell at ``position``; out-of-bounds positions are rejected."""
        if not is_position_valid(position.row, position.col):
            logger.error(
                "cell_out_of_bounds", extra={"row": position.row, "col": position.col}
            )
            raise ValueError(f"Position ({position.row}, {position.col}) is outside the board.")
        return self.grid[position.row][position.col]

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for row in self.grid:
            yield from row

    def positions_with_status(self, *statuses: CellStatus) -> list[Position]:
        wanted = set(statuses)
        return [cell.position for cell in self.cells() if cell.status in wanted]


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of a board for rendering."""

    cells: tuple[tuple[CellStatus, ...], ...]

    def status_at(self, position: Position) -> CellStatus:
        return self.cells[position.row][position.col]


def create_empty_board() -> Board:
    """Allocate a fresh grid with every cell empty and unoccupied."""
    return Board(
        grid=[
            [Cell(position=Position(row, col)) for col in range(BOARD_SIZE)]
            for row in range(BOARD_SIZE)
        ]
    )


def is_cell_empty(board: Board, position: Position) -> bool:
    """True when ``position`` is on the board and nothing occupies or has hit it."""
    if not is_position_valid(position.row, position.col):
        return False
    return board.cell(position).status is CellStatus.EMPTY


def snapshot_board(board: Board, reveal_ships: bool = True) -> BoardSnapshot:
    """Copy the board statuses; hidden boards show undamaged ship cells as water."""
    rows = []
    for row in board.grid:
        statuses = []
        for cell in row:
            status = cell.status
            if status is CellStatus.SHIP and not reveal_ships:
                status = CellStatus.EMPTY
            statuses.append(status)
        rows.append(tuple(statuses))
    return BoardSnapshot(cells=tuple(rows))
