"""Command-line driver for playing Sea Battle against the hunt/target AI."""

from __future__ import annotations

import argparse
import random

from seabattle.ai import HuntTargetAI
from seabattle.engine.board import Board, CellStatus, snapshot_board
from seabattle.engine.coordinates import BOARD_SIZE, Position, is_position_valid
from seabattle.engine.fleet import create_fleet
from seabattle.engine.game import (
    GamePhase,
    GameState,
    create_game_state,
    initialize_game,
    setup_random_fleets,
)
from seabattle.engine.placement import can_place_ship, place_ship
from seabattle.engine.player import PlayerId, assign_fleet
from seabattle.engine.ship import Orientation, Ship
from seabattle.engine.turns import TurnResult, process_turn
from seabattle.telemetry import init_telemetry

ROW_LABELS = "ABCDEFGHIJ"

CELL_SYMBOLS = {
    CellStatus.EMPTY: ".",
    CellStatus.SHIP: "S",
    CellStatus.MISS: "o",
    CellStatus.HIT: "X",
    CellStatus.SUNK: "#",
}


def _coordinate_from_input(text: str) -> Position:
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    if cleaned[0].isalpha():
        if cleaned[0] not in ROW_LABELS:
            raise ValueError("Row must be between A and J.")
        row = ROW_LABELS.index(cleaned[0])
        try:
            col = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError("Column must be a number between 1 and 10.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or '1 5'.")
        try:
            row, col = (int(part) - 1 for part in parts)
        except ValueError as exc:
            raise ValueError("Row and column must be numbers between 1 and 10.") from exc
    if not is_position_valid(row, col):
        raise ValueError("Coordinates must be within the 10x10 board.")
    return Position(row, col)


def _label(position: Position) -> str:
    return f"{ROW_LABELS[position.row]}{position.col + 1}"


def _format_board(board: Board, show_ships: bool) -> str:
    snapshot = snapshot_board(board, reveal_ships=show_ships)
    header = "    " + " ".join(f"{col + 1:>2}" for col in range(BOARD_SIZE))
    rows = [header]
    for row, statuses in enumerate(snapshot.cells):
        symbols = [f"{CELL_SYMBOLS[status]:>2}" for status in statuses]
        rows.append(f"{ROW_LABELS[row]} |" + " ".join(symbols))
    return "\n".join(rows)


def _describe_shot(name: str, position: Position, result: TurnResult) -> str:
    outcome = result.shot_result.value
    if result.sunk_ship is not None:
        outcome = f"sank the opponent's {result.sunk_ship.ship_type.value}!"
    return f"{name} fired at {_label(position)}: {outcome}"


def _prompt_orientation(ship: Ship) -> Orientation:
    while True:
        raw = (
            input(f"Place your {ship.ship_type.value} (length {ship.length}). Orientation [H/V]: ")
            .strip()
            .upper()
        )
        if raw in {"H", "HOR", "HORIZONTAL"}:
            return Orientation.HORIZONTAL
        if raw in {"V", "VER", "VERTICAL"}:
            return Orientation.VERTICAL
        print("Please enter H for horizontal or V for vertical.")


def _manual_ship_placement(board: Board) -> list[Ship]:
    fleet = create_fleet()
    for ship in sorted(fleet, key=lambda s: s.length, reverse=True):
        while True:
            print("\nCurrent layout:")
            print(_format_board(board, show_ships=True))
            orientation = (
                _prompt_orientation(ship) if ship.length > 1 else Orientation.HORIZONTAL
            )
            try:
                anchor = _coordinate_from_input(input("Enter starting coordinate (e.g., A1): "))
            except ValueError as exc:
                print(f"Invalid coordinate: {exc}")
                continue
            if can_place_ship(board, anchor, ship.length, orientation):
                ship.anchor = anchor
                ship.orientation = orientation
                place_ship(board, ship)
                break
            print("Ship cannot be placed there (off the board, overlapping or touching). Try again.")
    return fleet


def _prompt_manual_setup() -> bool:
    while True:
        raw = input("Would you like to place your ships manually? [Y/n]: ").strip().lower()
        if raw in {"", "y", "yes"}:
            return True
        if raw in {"n", "no"}:
            return False
        print("Please answer with 'y' or 'n'.")


def _prompt_for_target() -> Position:
    while True:
        raw = input("Enter target coordinate (e.g., A5) or 'q' to quit: ").strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            return _coordinate_from_input(raw)
        except ValueError as exc:
            print(f"Invalid input: {exc}")


def setup_game(name: str, rng: random.Random, manual: bool = False) -> GameState:
    """Create a game with the human fleet placed manually or at random."""
    state = create_game_state(name, "Computer")
    if manual:
        human = state.players[PlayerId.PLAYER1]
        assign_fleet(human, _manual_ship_placement(human.board))
    setup_random_fleets(state, rng)
    initialize_game(state)
    return state


def play_game(seed: int | None = None, name: str = "Player", auto_place: bool = False) -> None:
    print("Welcome to Sea Battle!\n")
    rng = random.Random(seed)
    manual = False if auto_place else _prompt_manual_setup()
    state = setup_game(name, rng, manual=manual)
    if not manual:
        print("\nYour ships have been positioned automatically.")

    ai = HuntTargetAI(rng)
    human = state.players[PlayerId.PLAYER1]
    computer = state.players[PlayerId.PLAYER2]

    while state.phase is GamePhase.BATTLE:
        if state.current_player is PlayerId.PLAYER1:
            print("\nYour Board:")
            print(_format_board(human.board, show_ships=True))
            print("\nEnemy Waters:")
            print(_format_board(computer.board, show_ships=False))

            position = _prompt_for_target()
            result = process_turn(state, position)
            if result.error:
                print(result.error)
                continue
            print(_describe_shot(human.name, position, result))
        else:
            for position, result in ai.play_turn(state):
                print(_describe_shot(computer.name, position, result))

    stats = human.stats
    print(
        f"\nShots fired: {stats.shots_fired}, hits: {stats.hits}, "
        f"misses: {stats.misses}, ships sunk: {stats.ships_destroyed}"
    )
    if state.winner is PlayerId.PLAYER1:
        print("Congratulations, you won!")
    else:
        print("The computer won this time. Better luck next battle!")


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Sea Battle via the CLI.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument("--name", default="Player", help="Your display name.")
    parser.add_argument(
        "--auto-place", action="store_true", help="Skip manual placement of your fleet."
    )
    args = parser.parse_args()
    init_telemetry()
    play_game(seed=args.seed, name=args.name, auto_place=args.auto_place)


if __name__ == "__main__":
    main()
