"""Random fleet placement used for quick setup and the computer opponent."""

from __future__ import annotations

import logging
import random

from seabattle.telemetry import get_tracer

from .board import Board
from .coordinates import BOARD_SIZE, Position
from .errors import PlacementError
from .placement import can_place_ship, place_ship
from .ship import Orientation, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.auto_placement")

MAX_PLACEMENT_ATTEMPTS = 1000


def auto_place_ships(
    board: Board,
    ships: list[Ship],
    rng: random.Random | None = None,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> None:
    """Place every ship at a random legal slot, longest ships first.

    Each ship's anchor and orientation are updated in place. Raises
    :class:`PlacementError` when a ship cannot be placed within ``max_attempts``.
    """
    rng = rng or random.Random()
    with tracer.start_as_current_span("auto_placement.auto_place_ships") as span:
        span.set_attribute("fleet.size", len(ships))
        for ship in sorted(ships, key=lambda s: s.length, reverse=True):
            attempts = 0
            placed = False
            while not placed and attempts < max_attempts:
                attempts += 1
                anchor = Position(rng.randrange(BOARD_SIZE), rng.randrange(BOARD_SIZE))
                orientation = rng.choice(list(Orientation))
                if can_place_ship(board, anchor, ship.length, orientation):
                    ship.anchor = anchor
                    ship.orientation = orientation
                    place_ship(board, ship)
                    placed = True

            if not placed:
                logger.error(
                    "auto_placement_exhausted",
                    extra={"ship_id": ship.id, "attempts": attempts},
                )
                raise PlacementError(
                    f"Failed to place ship {ship.id} after {max_attempts} attempts."
                )
            logger.debug(
                "random_ship_placed", extra={"ship_id": ship.id, "attempts": attempts}
            )
