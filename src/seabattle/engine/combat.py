"""Shot resolution against a board and its fleet."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from seabattle.telemetry import get_meter, get_tracer

from .board import Board, CellStatus
from .coordinates import Position
from .errors import InvariantViolation
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.combat")
meter = get_meter("seabattle.engine.combat")

SHOT_COUNTER = meter.create_counter(
    "seabattle_engine_shots",
    unit="1",
    description="Shots resolved against a board",
)


class ShotResult(Enum):
    """Outcome of a single shot."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"


# Cells that were already shot answer repeat shots without changing.
_SETTLED_CELLS: dict[CellStatus, ShotResult] = {
    CellStatus.MISS: ShotResult.MISS,
    CellStatus.HIT: ShotResult.HIT,
    CellStatus.SUNK: ShotResult.HIT,
}


def is_ship_sunk(ship: Ship) -> bool:
    return ship.hits >= ship.length


def find_ship_by_id(ships: Iterable[Ship], ship_id: str) -> Ship | None:
    """Return the first ship with ``ship_id``, or None."""
    for ship in ships:
        if ship.id == ship_id:
            return ship
    return None


def get_all_ships_from_board(board: Board) -> set[str]:
    """Collect the ids of ships that still have undamaged cells on the board."""
    return {
        cell.occupant_id
        for cell in board.cells()
        if cell.status is CellStatus.SHIP and cell.occupant_id is not None
    }


def process_shot(board: Board, position: Position, ships: list[Ship]) -> ShotResult:
    """Resolve a shot at ``position``, mutating the board cell and the struck ship."""
    with tracer.start_as_current_span("combat.process_shot") as span:
        span.set_attribute("shot.row", position.row)
        span.set_attribute("shot.col", position.col)
        cell = board.cell(position)

        settled = _SETTLED_CELLS.get(cell.status)
        if settled is not None:
            span.set_attribute("shot.repeat", True)
            logger.debug(
                "shot_repeated",
                extra={"row": position.row, "col": position.col, "status": cell.status.value},
            )
            return settled

        if cell.status is CellStatus.EMPTY:
            cell.status = CellStatus.MISS
            result = ShotResult.MISS
        else:
            ship = _occupant(cell.occupant_id, ships, position)
            cell.status = CellStatus.HIT
            ship.hits += 1
            if is_ship_sunk(ship):
                ship.is_sunk = True
                _mark_sunk(board, ship)
                result = ShotResult.SUNK
            else:
                result = ShotResult.HIT

        span.set_attribute("shot.outcome", result.value)
        SHOT_COUNTER.add(1, attributes={"outcome": result.value})
        logger.info(
            "shot_resolved",
            extra={"row": position.row, "col": position.col, "outcome": result.value},
        )
        return result


def _occupant(ship_id: str | None, ships: list[Ship], position: Position) -> Ship:
    if ship_id is None:
        logger.error(
            "ship_cell_without_occupant", extra={"row": position.row, "col": position.col}
        )
        raise InvariantViolation(
            f"Ship cell ({position.row}, {position.col}) has no occupant id."
        )
    ship = find_ship_by_id(ships, ship_id)
    if ship is None:
        logger.error(
            "occupant_not_in_fleet",
            extra={"row": position.row, "col": position.col, "ship_id": ship_id},
        )
        raise InvariantViolation(f"Ship {ship_id!r} is not part of the defending fleet.")
    return ship


def _mark_sunk(board: Board, ship: Ship) -> None:
    for position in ship.footprint():
        board.cell(position).status = CellStatus.SUNK
