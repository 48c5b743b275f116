"""Rules engine: boards, fleets, shots, turns and victory."""

from .auto_placement import auto_place_ships
from .board import (
    Board,
    BoardSnapshot,
    Cell,
    CellStatus,
    create_empty_board,
    is_cell_empty,
    snapshot_board,
)
from .combat import (
    ShotResult,
    find_ship_by_id,
    get_all_ships_from_board,
    is_ship_sunk,
    process_shot,
)
from .coordinates import BOARD_SIZE, Position, is_position_valid
from .errors import EngineError, InvariantViolation, NoTargetsAvailable, PlacementError
from .fleet import DEFAULT_FLEET_CONFIG, FleetConfig, create_fleet
from .game import (
    GamePhase,
    GameSnapshot,
    GameState,
    check_victory,
    create_game_state,
    get_current_player,
    get_opponent,
    get_opponent_player,
    initialize_game,
    setup_random_fleets,
    snapshot_game,
    switch_turn,
)
from .placement import can_place_ship, has_adjacent_ships, place_ship
from .player import Player, PlayerId, PlayerStats, assign_fleet, create_player, is_fleet_destroyed
from .ship import Orientation, Ship, ShipType, get_ship_cells
from .turns import TurnResult, can_shoot_again, process_turn

__all__ = [
    "BOARD_SIZE",
    "Board",
    "BoardSnapshot",
    "Cell",
    "CellStatus",
    "DEFAULT_FLEET_CONFIG",
    "EngineError",
    "FleetConfig",
    "GamePhase",
    "GameSnapshot",
    "GameState",
    "InvariantViolation",
    "NoTargetsAvailable",
    "Orientation",
    "PlacementError",
    "Player",
    "PlayerId",
    "PlayerStats",
    "Position",
    "Ship",
    "ShipType",
    "ShotResult",
    "TurnResult",
    "assign_fleet",
    "auto_place_ships",
    "can_place_ship",
    "can_shoot_again",
    "check_victory",
    "create_empty_board",
    "create_fleet",
    "create_game_state",
    "create_player",
    "find_ship_by_id",
    "get_all_ships_from_board",
    "get_current_player",
    "get_opponent",
    "get_opponent_player",
    "get_ship_cells",
    "has_adjacent_ships",
    "initialize_game",
    "is_cell_empty",
    "is_fleet_destroyed",
    "is_position_valid",
    "is_ship_sunk",
    "place_ship",
    "process_shot",
    "process_turn",
    "setup_random_fleets",
    "snapshot_board",
    "snapshot_game",
    "switch_turn",
]
