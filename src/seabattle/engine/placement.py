"""Ship placement validation and board mutation."""

from __future__ import annotations

import logging

from seabattle.telemetry import get_meter, get_tracer

from .board import Board, CellStatus
from .coordinates import Position, is_position_valid
from .ship import Orientation, Ship, get_ship_cells

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.placement")
meter = get_meter("seabattle.engine.placement")

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_ship_placements",
    unit="1",
    description="Number of ships written onto a board",
)

NEIGHBOUR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


def has_adjacent_ships(board: Board, position: Position) -> bool:
    """Return True if any of the 8 surrounding cells holds an undamaged ship."""
    for delta_row, delta_col in NEIGHBOUR_OFFSETS:
        row = position.row + delta_row
        col = position.col + delta_col
        if not is_position_valid(row, col):
            continue
        if board.grid[row][col].status is CellStatus.SHIP:
            return True
    return False


def can_place_ship(
    board: Board, anchor: Position, length: int, orientation: Orientation
) -> bool:
    """Determine whether a ship fits without overlapping or touching another."""
    for cell in get_ship_cells(anchor, length, orientation):
        if not is_position_valid(cell.row, cell.col):
            return False
        if board.grid[cell.row][cell.col].status is not CellStatus.EMPTY:
            return False
        if has_adjacent_ships(board, cell):
            return False
    return True


def place_ship(board: Board, ship: Ship) -> None:
    """Write ``ship`` onto the board.

    No validation happens here; callers check :func:`can_place_ship` first.
    """
    with tracer.start_as_current_span("placement.place_ship") as span:
        span.set_attribute("ship.id", ship.id)
        span.set_attribute("ship.length", ship.length)
        span.set_attribute("ship.anchor.row", ship.anchor.row)
        span.set_attribute("ship.anchor.col", ship.anchor.col)
        for position in ship.footprint():
            cell = board.grid[position.row][position.col]
            cell.status = CellStatus.SHIP
            cell.occupant_id = ship.id
        PLACEMENT_COUNTER.add(1, attributes={"ship_type": ship.ship_type.value})
        logger.debug(
            "ship_placed",
            extra={
                "ship_id": ship.id,
                "orientation": ship.orientation.value,
                "row": ship.anchor.row,
                "col": ship.anchor.col,
            },
        )
