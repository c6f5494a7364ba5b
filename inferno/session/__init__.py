"""
Inferno Dice Session Layer.

Wires the round state machine to its collaborators: the effect runner,
gateway protocols with null fallbacks, and the GameSession host facade.
"""

from inferno.session.effect_runner import EffectRunner
from inferno.session.gateways import (
    NullPersistence,
    NullRank,
    NullStats,
    PersistenceGateway,
    RankGateway,
    StatsGateway,
)
from inferno.session.manager import GameSession, create_session

__all__ = [
    # Facade
    "GameSession",
    "create_session",
    "EffectRunner",
    # Gateways
    "PersistenceGateway",
    "StatsGateway",
    "RankGateway",
    "NullPersistence",
    "NullStats",
    "NullRank",
]
