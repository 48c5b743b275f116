"""Fleet roster construction."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, field_validator

from .ship import Orientation, Ship, ShipType

logger = logging.getLogger(__name__)


class FleetConfig(BaseModel):
    """How many ships of each type a fleet holds, in build order."""

    model_config = ConfigDict(frozen=True)

    counts: dict[ShipType, int]

    @field_validator("counts")
    @classmethod
    def _counts_not_negative(cls, value: dict[ShipType, int]) -> dict[ShipType, int]:
        for ship_type, count in value.items():
            if count < 0:
                raise ValueError(f"Ship count for {ship_type.value} cannot be negative.")
        return value

    @property
    def total_ships(self) -> int:
        return sum(self.counts.values())


DEFAULT_FLEET_CONFIG = FleetConfig(
    counts={
        ShipType.CARRIER: 1,
        ShipType.BATTLESHIP: 2,
        ShipType.CRUISER: 3,
        ShipType.SUBMARINE: 4,
    }
)


def create_fleet(config: FleetConfig = DEFAULT_FLEET_CONFIG) -> list[Ship]:
    """Build unplaced ships with ids like ``cruiser-2``, numbered per type from 1."""
    fleet: list[Ship] = []
    for ship_type, count in config.counts.items():
        for index in range(1, count + 1):
            fleet.append(
                Ship(
                    id=f"{ship_type.value}-{index}",
                    ship_type=ship_type,
                    orientation=Orientation.HORIZONTAL,
                )
            )
    logger.debug("fleet_created", extra={"ships": len(fleet)})
    return fleet
