"""Ship domain model for the Sea Battle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .coordinates import Position


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ShipType(Enum):
    """All supported ship classes; the value doubles as the id prefix."""

    CARRIER = "carrier"
    BATTLESHIP = "battleship"
    CRUISER = "cruiser"
    SUBMARINE = "submarine"

    @property
    def length(self) -> int:
        """Return the number of contiguous cells the ship occupies."""
        return SHIP_LENGTHS[self]


SHIP_LENGTHS: dict[ShipType, int] = {
    ShipType.CARRIER: 4,
    ShipType.BATTLESHIP: 3,
    ShipType.CRUISER: 2,
    ShipType.SUBMARINE: 1,
}

# Ships built by the fleet builder sit here until they are placed.
PLACEHOLDER_ANCHOR = Position(0, 0)


@dataclass
class Ship:
    """Represents a single ship instance.

    ``anchor`` is the top-left cell of the footprint. ``hits`` counts distinct
    cells struck so far and ``is_sunk`` flips once it reaches ``length``.
    """

    id: str
    ship_type: ShipType
    anchor: Position = PLACEHOLDER_ANCHOR
    orientation: Orientation = Orientation.HORIZONTAL
    length: int | None = None
    hits: int = 0
    is_sunk: bool = False

    def __post_init__(self) -> None:
        if self.length is None:
            self.length = self.ship_type.length
        if self.length < 1:
            raise ValueError(f"Ship {self.id} must occupy at least one cell.")

    def footprint(self) -> list[Position]:
        """Return the ordered list of positions occupied by this ship."""
        return get_ship_cells(self.anchor, self.length, self.orientation)


def get_ship_cells(anchor: Position, length: int, orientation: Orientation) -> list[Position]:
    """Walk ``length`` cells from ``anchor`` along the orientation axis (no bounds filtering)."""
    cells: list[Position] = []
    for offset in range(length):
        if orientation is Orientation.HORIZONTAL:
            cells.append(Position(anchor.row, anchor.col + offset))
        else:
            cells.append(Position(anchor.row + offset, anchor.col))
    return cells
