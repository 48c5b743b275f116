"""Exceptions raised by the rules engine.

Caller mistakes during play (bad coordinates, wrong phase) are reported on the
turn result instead; the classes here signal corrupted engine state.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for rules-engine failures."""


class InvariantViolation(EngineError, RuntimeError):
    """Board, fleet or player records contradict each other."""


class NoTargetsAvailable(InvariantViolation):
    """Every cell of the target board has already been shot."""


class PlacementError(EngineError, RuntimeError):
    """Random placement could not find a slot for a ship."""
