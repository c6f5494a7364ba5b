"""
Inferno Dice - Side Effects

State-machine transitions never perform I/O. They return these effect
objects, and the host hands them to an effect runner which talks to the
gateways, notifies listeners and schedules CPU turns.
"""

from dataclasses import dataclass, field
from typing import Any

from inferno.engine.events import EventPayload


@dataclass(frozen=True)
class CpuTurnToken:
    """Identifies the round a scheduled CPU turn belongs to."""
    session_id: str
    epoch: int
    round_index: int


@dataclass(frozen=True)
class Notify:
    payload: EventPayload


@dataclass(frozen=True)
class RecordRoll:
    code: int


@dataclass(frozen=True)
class RecordClaim:
    code: int


@dataclass(frozen=True)
class RecordOutcome:
    """Final claim credited to the winner (or loser) of a quick-play game."""
    winner: str
    winning_claim: str | None = None
    losing_claim: str | None = None


@dataclass(frozen=True)
class RecordRun:
    streak: int


@dataclass(frozen=True)
class FetchGlobalBest:
    pass


@dataclass(frozen=True)
class SubmitGlobalBest:
    streak: int


@dataclass(frozen=True)
class UpdateRank:
    mode: str
    won: bool | None = None
    survival_streak: int = 0
    bluff_events: int = 0
    correct_bluff_events: int = 0


@dataclass(frozen=True)
class SaveOpponentState:
    blob: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ScheduleCpuTurn:
    token: CpuTurnToken


Effect = (
    Notify
    | RecordRoll
    | RecordClaim
    | RecordOutcome
    | RecordRun
    | FetchGlobalBest
    | SubmitGlobalBest
    | UpdateRank
    | SaveOpponentState
    | ScheduleCpuTurn
)
