"""Two-player game state and phase transitions."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum

from seabattle.telemetry import get_tracer, record_game_metric

from .auto_placement import auto_place_ships
from .board import BoardSnapshot, snapshot_board
from .fleet import create_fleet
from .player import (
    Player,
    PlayerId,
    PlayerStats,
    assign_fleet,
    create_player,
    is_fleet_destroyed,
)

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")


class GamePhase(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    BATTLE = "battle"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """The single mutable record describing one match.

    ``winner`` is set exactly when ``phase`` is ``GAME_OVER``. ``turn_count``
    is 0 during setup, 1 when battle starts, and grows on every change of turn.
    """

    players: dict[PlayerId, Player]
    phase: GamePhase = GamePhase.SETUP
    current_player: PlayerId = PlayerId.PLAYER1
    winner: PlayerId | None = None
    turn_count: int = 0


@dataclass(frozen=True)
class PlayerSnapshot:
    id: PlayerId
    name: str
    ships_remaining: int
    stats: PlayerStats
    board: BoardSnapshot


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable copy of the game for presentation layers."""

    phase: GamePhase
    current_player: PlayerId
    winner: PlayerId | None
    turn_count: int
    players: dict[PlayerId, PlayerSnapshot] = field(default_factory=dict)


def create_game_state(player1_name: str, player2_name: str) -> GameState:
    """Start a new match in the setup phase with two fresh players."""
    return GameState(
        players={
            PlayerId.PLAYER1: create_player(PlayerId.PLAYER1, player1_name),
            PlayerId.PLAYER2: create_player(PlayerId.PLAYER2, player2_name),
        }
    )


def initialize_game(state: GameState) -> None:
    """Move from setup to battle, building default fleets for players without one.

    Does nothing once the game has left the setup phase. Fleets that were
    already assigned (manual placement) are left untouched.
    """
    if state.phase is not GamePhase.SETUP:
        return

    for player in state.players.values():
        if not player.ships:
            assign_fleet(player, create_fleet())

    state.phase = GamePhase.BATTLE
    state.current_player = PlayerId.PLAYER1
    state.turn_count = 1
    logger.info(
        "game_started",
        extra={
            "player1_ships": len(state.players[PlayerId.PLAYER1].ships),
            "player2_ships": len(state.players[PlayerId.PLAYER2].ships),
        },
    )


def setup_random_fleets(state: GameState, rng: random.Random | None = None) -> None:
    """Build and randomly place a default fleet for every player that has none."""
    if state.phase is not GamePhase.SETUP:
        logger.error("random_setup_rejected", extra={"phase": state.phase.value})
        raise RuntimeError("Fleets can only be placed during setup.")
    rng = rng or random.Random()
    with tracer.start_as_current_span("game.setup_random_fleets"):
        for player in state.players.values():
            if player.ships:
                continue
            fleet = create_fleet()
            auto_place_ships(player.board, fleet, rng)
            assign_fleet(player, fleet)
            logger.debug("game_random_placement", extra={"owner": player.id.value})


def switch_turn(state: GameState) -> None:
    state.current_player = get_opponent(state.current_player)
    state.turn_count += 1


def get_opponent(player_id: PlayerId) -> PlayerId:
    return player_id.opponent()


def get_current_player(state: GameState) -> Player:
    return state.players[state.current_player]


def get_opponent_player(state: GameState) -> Player:
    return state.players[get_opponent(state.current_player)]


def check_victory(state: GameState) -> PlayerId | None:
    """Detect a destroyed fleet and end the game in favour of the intact side."""
    if state.phase is GamePhase.SETUP:
        return None
    if state.phase is GamePhase.GAME_OVER:
        return state.winner

    if is_fleet_destroyed(state.players[PlayerId.PLAYER2]):
        winner = PlayerId.PLAYER1
    elif is_fleet_destroyed(state.players[PlayerId.PLAYER1]):
        winner = PlayerId.PLAYER2
    else:
        return None

    state.phase = GamePhase.GAME_OVER
    state.winner = winner
    record_game_metric("seabattle_game_completed_total", 1, {"winner": winner.value})
    logger.info(
        "game_finished", extra={"winner": winner.value, "turn_count": state.turn_count}
    )
    return winner


def snapshot_game(state: GameState) -> GameSnapshot:
    """Return an immutable copy of the match with both boards fully revealed."""
    return GameSnapshot(
        phase=state.phase,
        current_player=state.current_player,
        winner=state.winner,
        turn_count=state.turn_count,
        players={
            player_id: PlayerSnapshot(
                id=player.id,
                name=player.name,
                ships_remaining=player.ships_remaining,
                stats=replace(player.stats),
                board=snapshot_board(player.board),
            )
            for player_id, player in state.players.items()
        },
    )
