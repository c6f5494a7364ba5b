"""
Inferno Dice Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles claim ranking, reverses, Inferno lockdown, bluff resolution,
scoring and the CPU's turn sequencing.
"""

from inferno.engine.base import (
    Actor,
    ClaimCategory,
    ClaimRecord,
    DiceRoll,
    EventRecord,
    GameConfig,
    GameMode,
    LastAction,
    Phase,
    RoundOutcome,
    ScoreChange,
)
from inferno.engine.challenge import ChallengeResolver
from inferno.engine.claims import INFERNO, REVERSE, SOCIAL, ClaimEngine
from inferno.engine.events import EventPayload, GameEvent
from inferno.engine.ledger import LossOutcome, ScoreLedger
from inferno.engine.opponent import CallBluff, DefaultOpponent, OpponentDecisionPort, Raise
from inferno.engine.round_machine import RoundStateMachine

__all__ = [
    # Data Classes
    "DiceRoll",
    "RoundOutcome",
    "ClaimRecord",
    "EventRecord",
    "ScoreChange",
    "GameConfig",
    "LossOutcome",
    "EventPayload",
    # Enums
    "Actor",
    "GameMode",
    "ClaimCategory",
    "LastAction",
    "Phase",
    "GameEvent",
    # Special claims
    "INFERNO",
    "REVERSE",
    "SOCIAL",
    # Engines
    "ClaimEngine",
    "ChallengeResolver",
    "ScoreLedger",
    "RoundStateMachine",
    # Opponent
    "OpponentDecisionPort",
    "DefaultOpponent",
    "Raise",
    "CallBluff",
]
