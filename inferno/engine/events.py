"""
Inferno Dice - Game Event Definitions

Event types and payloads the engine emits for the host to render or persist.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class GameEvent(Enum):
    """Events that can occur during a session."""

    GAME_STARTED = auto()
    RUN_STARTED = auto()
    RUN_STOPPED = auto()
    DICE_ROLLED = auto()
    CLAIM_MADE = auto()
    SOCIAL_SHOWN = auto()
    BLUFF_CALLED = auto()
    INFERNO_FORFEITED = auto()
    POINTS_LOST = auto()
    ROUND_RESOLVED = auto()
    GAME_WON = auto()
    STREAK_EXTENDED = auto()
    STREAK_BROKEN = auto()


@dataclass
class EventPayload:
    """Wrapper for engine event data."""

    event: GameEvent
    session_id: str
    actor: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
