"""
Inferno Dice - Test Configuration and Fixtures

Scripted dice, scripted opponents, zero-delay configs and recording
gateways shared by all test modules.
"""

import random
from collections import deque
from typing import Any
from unittest.mock import MagicMock

import pytest

from inferno.engine.base import DiceRoll, GameConfig
from inferno.engine.opponent import OpponentDecisionPort, Raise
from inferno.engine.round_machine import RoundStateMachine


# =============================================================================
# SCRIPTED COLLABORATORS
# =============================================================================

class ScriptedRoller:
    """Dice roller that returns queued rolls in order."""

    def __init__(self) -> None:
        self.queue: deque[DiceRoll] = deque()

    def push(self, *rolls: tuple[int, int]) -> "ScriptedRoller":
        for d1, d2 in rolls:
            self.queue.append(DiceRoll.of(d1, d2))
        return self

    def __call__(self) -> DiceRoll:
        if not self.queue:
            raise AssertionError("No scripted roll left")
        return self.queue.popleft()


class ScriptedOpponent(OpponentDecisionPort):
    """Opponent that replays queued decisions and records every hook."""

    def __init__(self) -> None:
        self.decisions: deque = deque()
        self.decide_calls: list[tuple[int | None, int]] = []
        self.showdowns: list[tuple[int, int | None]] = []
        self.resolved_raises: list[tuple[int, int, bool]] = []
        self.round_outcomes: list[bool] = []
        self.loaded: dict[str, Any] | None = None

    def push(self, *decisions) -> "ScriptedOpponent":
        self.decisions.extend(decisions)
        return self

    def decide(self, challenge, roll, history):
        self.decide_calls.append((challenge, roll.code))
        if self.decisions:
            return self.decisions.popleft()
        return Raise(None)

    def observe_showdown(self, claim, actual):
        self.showdowns.append((claim, actual))

    def observe_raise_resolved(self, claim, actual, called):
        self.resolved_raises.append((claim, actual, called))

    def observe_round_outcome(self, lost):
        self.round_outcomes.append(lost)

    def state(self):
        return {"raises": len(self.resolved_raises)}

    def load_state(self, blob):
        self.loaded = blob


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def roller() -> ScriptedRoller:
    return ScriptedRoller()


@pytest.fixture
def opponent() -> ScriptedOpponent:
    return ScriptedOpponent()


@pytest.fixture
def config() -> GameConfig:
    """Game config with no CPU thinking delay."""
    return GameConfig(think_delay=0.0, tense_delay=0.0)


@pytest.fixture
def machine(opponent, config, roller) -> RoundStateMachine:
    return RoundStateMachine(
        opponent,
        config=config,
        roller=roller,
        rng=random.Random(7),
        session_id="test-session",
    )


# =============================================================================
# GATEWAY FIXTURES
# =============================================================================

@pytest.fixture
def stats() -> MagicMock:
    """Recording stats gateway with a known global best of 12."""
    gateway = MagicMock()
    gateway.fetch_global_best.return_value = 12
    gateway.submit_global_best.side_effect = lambda streak: max(streak, 12)
    return gateway


@pytest.fixture
def rank() -> MagicMock:
    return MagicMock()


@pytest.fixture
def persistence() -> MagicMock:
    gateway = MagicMock()
    gateway.load.return_value = None
    return gateway


@pytest.fixture
def mock_client() -> MagicMock:
    """Minimal mock Supabase client."""
    return MagicMock()
