"""Turn processing: one shot by the player to move, with the hit bonus."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from seabattle.telemetry import get_meter, get_tracer

from .combat import ShotResult, find_ship_by_id, process_shot
from .coordinates import Position, is_position_valid
from .errors import InvariantViolation
from .game import (
    GamePhase,
    GameState,
    check_victory,
    get_current_player,
    get_opponent_player,
    switch_turn,
)
from .player import Player, PlayerId
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.turns")
meter = get_meter("seabattle.engine.turns")

TURN_COUNTER = meter.create_counter(
    "seabattle_engine_turns",
    unit="1",
    description="Shots submitted through process_turn",
)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of :func:`process_turn`.

    ``error`` is only set for rejected shots, which leave the game untouched.
    """

    shot_result: ShotResult
    continues_turn: bool
    winner: PlayerId | None = None
    sunk_ship: Ship | None = None
    error: str | None = None


def can_shoot_again(result: ShotResult) -> bool:
    """A hit or a sinking earns the shooter another shot."""
    return result is ShotResult.HIT or result is ShotResult.SUNK


def process_turn(state: GameState, position: Position) -> TurnResult:
    """Fire at ``position`` on behalf of ``state.current_player``."""
    with tracer.start_as_current_span("turns.process_turn") as span:
        span.set_attribute("player", state.current_player.value)
        span.set_attribute("row", position.row)
        span.set_attribute("col", position.col)

        error = _rejection(state, position)
        if error is not None:
            span.set_attribute("rejected", True)
            TURN_COUNTER.add(1, attributes={"result": "rejected"})
            logger.warning(
                "turn_rejected",
                extra={"row": position.row, "col": position.col, "reason": error},
            )
            return TurnResult(shot_result=ShotResult.MISS, continues_turn=False, error=error)

        shooter = get_current_player(state)
        defender = get_opponent_player(state)

        shot_result = process_shot(defender.board, position, defender.ships)
        sunk_ship = None
        if shot_result is ShotResult.SUNK:
            sunk_ship = _sunk_ship(defender, position)
        _record_shot(shooter, defender, shot_result, sunk_ship)

        winner = check_victory(state)
        continues_turn = can_shoot_again(shot_result)
        if not continues_turn and winner is None:
            switch_turn(state)

        span.set_attribute("shot.outcome", shot_result.value)
        span.set_attribute("continues_turn", continues_turn)
        TURN_COUNTER.add(
            1, attributes={"result": shot_result.value, "player": shooter.id.value}
        )
        logger.info(
            "turn_processed",
            extra={
                "player": shooter.id.value,
                "row": position.row,
                "col": position.col,
                "outcome": shot_result.value,
                "continues_turn": continues_turn,
                "turn_count": state.turn_count,
            },
        )
        return TurnResult(
            shot_result=shot_result,
            continues_turn=continues_turn,
            winner=winner,
            sunk_ship=sunk_ship,
        )


def _rejection(state: GameState, position: Position) -> str | None:
    if not is_position_valid(position.row, position.col):
        return "Invalid position - outside board boundaries"
    if state.phase is GamePhase.GAME_OVER:
        return "Cannot shoot - game is over"
    if state.phase is not GamePhase.BATTLE:
        return "Cannot shoot - game is not in BATTLE phase"
    return None


def _sunk_ship(defender: Player, position: Position) -> Ship:
    ship_id = defender.board.cell(position).occupant_id
    ship = find_ship_by_id(defender.ships, ship_id) if ship_id is not None else None
    if ship is None:
        logger.error(
            "sunk_ship_missing",
            extra={"row": position.row, "col": position.col, "ship_id": ship_id},
        )
        raise InvariantViolation(
            f"Sunk cell ({position.row}, {position.col}) does not resolve to a ship."
        )
    if defender.ships_remaining <= 0:
        logger.error("ships_remaining_exhausted", extra={"owner": defender.id.value})
        raise InvariantViolation(
            f"{defender.id.value} lost ship {ship.id} with no ships remaining on record."
        )
    return ship


def _record_shot(
    shooter: Player, defender: Player, result: ShotResult, sunk_ship: Ship | None
) -> None:
    """Apply every statistic for one resolved shot in a single step."""
    shooter.stats.shots_fired += 1
    if result is ShotResult.MISS:
        shooter.stats.misses += 1
    else:
        shooter.stats.hits += 1
    if sunk_ship is not None:
        defender.ships_remaining -= 1
        shooter.stats.ships_destroyed += 1
