"""AI package exports."""

from .targeting import (
    AIMode,
    AIState,
    HuntTargetAI,
    calculate_ai_shot,
    create_ai_state,
    update_ai_state,
)

__all__ = [
    "AIMode",
    "AIState",
    "HuntTargetAI",
    "calculate_ai_shot",
    "create_ai_state",
    "update_ai_state",
]
