"""Player records: board, fleet and shooting statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .board import Board, create_empty_board
from .ship import Ship


class PlayerId(Enum):
    """The two fixed seats at the table."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"

    def opponent(self) -> PlayerId:
        """Return the opposing player."""
        return PlayerId.PLAYER2 if self is PlayerId.PLAYER1 else PlayerId.PLAYER1


@dataclass
class PlayerStats:
    shots_fired: int = 0
    hits: int = 0
    misses: int = 0
    ships_destroyed: int = 0


@dataclass
class Player:
    """One side of the game."""

    id: PlayerId
    name: str
    board: Board = field(default_factory=create_empty_board)
    ships: list[Ship] = field(default_factory=list)
    ships_remaining: int = 0
    stats: PlayerStats = field(default_factory=PlayerStats)


def create_player(player_id: PlayerId, name: str) -> Player:
    """Create a player with an empty board, no fleet and zeroed stats."""
    if not name or not name.strip():
        raise ValueError("Player name must not be empty.")
    return Player(id=player_id, name=name)


def assign_fleet(player: Player, ships: list[Ship]) -> None:
    """Hand ``ships`` to ``player`` and count the ones still afloat."""
    player.ships = ships
    player.ships_remaining = sum(1 for ship in ships if not ship.is_sunk)


def is_fleet_destroyed(player: Player) -> bool:
    """True once every ship is sunk; an empty fleet is never destroyed."""
    if not player.ships:
        return False
    return all(ship.is_sunk for ship in player.ships)
