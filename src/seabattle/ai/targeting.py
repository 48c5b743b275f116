"""Hunt/target heuristic for the computer opponent.

In hunt mode the AI fires at a random unshot cell. A hit that does not sink
switches it to target mode, where it works through the orthogonal neighbours
of its hits, preferring cells on the line formed by the last two hits. Sinking
the ship drops it back to hunt mode.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from seabattle.engine.board import Board, CellStatus
from seabattle.engine.combat import ShotResult
from seabattle.engine.coordinates import Position, is_position_valid
from seabattle.engine.errors import NoTargetsAvailable
from seabattle.engine.game import GamePhase, GameState, get_opponent_player
from seabattle.engine.turns import TurnResult, process_turn
from seabattle.telemetry import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.ai.targeting")

_SHOOTABLE = (CellStatus.EMPTY, CellStatus.SHIP)


class AIMode(Enum):
    HUNT = "hunt"
    TARGET = "target"


@dataclass
class AIState:
    """Search state carried between the AI's shots."""

    mode: AIMode = AIMode.HUNT
    target_queue: deque[Position] = field(default_factory=deque)
    last_hit: Position | None = None
    hits: list[Position] = field(default_factory=list)


def create_ai_state() -> AIState:
    return AIState()


def is_shootable(board: Board, position: Position) -> bool:
    """True when ``position`` has not been fired at yet."""
    return board.cell(position).status in _SHOOTABLE


def calculate_ai_shot(
    board: Board, ai_state: AIState, rng: random.Random | None = None
) -> Position:
    """Pick the next cell to fire at, consuming stale entries from the target queue."""
    while ai_state.mode is AIMode.TARGET and ai_state.target_queue:
        candidate = ai_state.target_queue.popleft()
        if is_shootable(board, candidate):
            return candidate

    if ai_state.mode is AIMode.TARGET:
        ai_state.mode = AIMode.HUNT
        logger.debug("ai_target_queue_exhausted")

    available = board.positions_with_status(*_SHOOTABLE)
    if not available:
        logger.error("ai_no_targets_available")
        raise NoTargetsAvailable("No available cells to shoot at.")
    return (rng or random).choice(available)


def update_ai_state(
    ai_state: AIState, position: Position, was_hit: bool, was_sunk: bool
) -> None:
    """Fold the outcome of the AI's last shot into its search state."""
    if not was_hit:
        return

    ai_state.hits.append(position)
    if was_sunk:
        ai_state.mode = AIMode.HUNT
        ai_state.target_queue.clear()
        ai_state.last_hit = None
        return

    ai_state.last_hit = position
    ai_state.mode = AIMode.TARGET
    for neighbour in _orthogonal_neighbours(position):
        if neighbour not in ai_state.target_queue:
            ai_state.target_queue.append(neighbour)
    _prioritise_line(ai_state)


def _orthogonal_neighbours(position: Position) -> list[Position]:
    candidates = (
        Position(position.row - 1, position.col),
        Position(position.row + 1, position.col),
        Position(position.row, position.col - 1),
        Position(position.row, position.col + 1),
    )
    return [cell for cell in candidates if is_position_valid(cell.row, cell.col)]


def _prioritise_line(ai_state: AIState) -> None:
    """Move queued cells collinear with the last two hits to the front."""
    if len(ai_state.hits) < 2:
        return
    last, previous = ai_state.hits[-1], ai_state.hits[-2]
    same_row = last.row == previous.row
    if not same_row and last.col != previous.col:
        return

    def off_line(cell: Position) -> bool:
        return cell.row != last.row if same_row else cell.col != last.col

    ai_state.target_queue = deque(sorted(ai_state.target_queue, key=off_line))


class HuntTargetAI:
    """Computer opponent driving :func:`process_turn` with the hunt/target heuristic."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.state = create_ai_state()

    def choose_shot(self, board: Board) -> Position:
        with tracer.start_as_current_span("ai.choose_shot") as span:
            position = calculate_ai_shot(board, self.state, self._rng)
            span.set_attribute("ai.mode", self.state.mode.value)
            span.set_attribute("row", position.row)
            span.set_attribute("col", position.col)
            return position

    def observe(self, position: Position, result: ShotResult) -> None:
        update_ai_state(
            self.state,
            position,
            was_hit=result is not ShotResult.MISS,
            was_sunk=result is ShotResult.SUNK,
        )

    def play_turn(self, game: GameState) -> list[tuple[Position, TurnResult]]:
        """Fire for the side to move until the turn passes or the game ends."""
        shots: list[tuple[Position, TurnResult]] = []
        while game.phase is GamePhase.BATTLE:
            position = self.choose_shot(get_opponent_player(game).board)
            result = process_turn(game, position)
            shots.append((position, result))
            self.observe(position, result.shot_result)
            logger.info(
                "ai_shot",
                extra={
                    "row": position.row,
                    "col": position.col,
                    "outcome": result.shot_result.value,
                    "mode": self.state.mode.value,
                },
            )
            if not result.continues_turn:
                break
        return shots
