"""
Inferno Dice - Opponent Decision Port

The CPU's policy sits behind a narrow interface. The state machine asks
for a decision once the CPU has rolled, and re-validates whatever comes
back against the claim engine; a strategy is never trusted for legality.

Decisions are a tagged variant:
- Raise(claim): declare a claim (truthful or a bluff)
- CallBluff(): challenge the standing claim
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

from inferno.engine.base import Actor, ClaimHistoryEntry, ClaimRecord, DiceRoll
from inferno.engine.challenge import ChallengeResolver
from inferno.engine.claims import INFERNO, REVERSE, SOCIAL, ClaimEngine


@dataclass(frozen=True)
class Raise:
    """Declare a claim. None lets the engine pick the minimal legal value."""
    claim: int | None


@dataclass(frozen=True)
class CallBluff:
    """Challenge the standing claim."""


Decision = Raise | CallBluff


class OpponentDecisionPort(ABC):
    """Contract every CPU strategy satisfies.

    Only decide() is required. The observe_* hooks let adaptive strategies
    learn; state()/load_state() round-trip whatever they want persisted.
    """

    @abstractmethod
    def decide(
        self,
        challenge: int | None,
        roll: DiceRoll,
        history: Sequence[ClaimHistoryEntry],
    ) -> Decision:
        ...

    def observe_showdown(self, claim: int, actual: int | None) -> None:
        """The CPU called a bluff and saw the opponent's real roll."""
        return

    def observe_raise_resolved(self, claim: int, actual: int, called: bool) -> None:
        """One of our raises was accepted (called=False) or contested."""
        return

    def observe_round_outcome(self, lost: bool) -> None:
        return

    def state(self) -> dict[str, Any]:
        return {}

    def load_state(self, blob: dict[str, Any]) -> None:
        return


def _meet_probability() -> dict[int, float]:
    """Chance that a fresh roll meets or beats each ordinary claim."""
    rolls = [ClaimEngine.normalize_roll(a, b) for a in range(1, 7) for b in range(1, 7)]
    table = {}
    for claim in ClaimEngine.enumerate_claims():
        hits = sum(
            1 for actual in rolls
            if actual not in (REVERSE, SOCIAL) and ClaimEngine.meets_or_beats(actual, claim)
        )
        table[claim] = hits / len(rolls)
    return table


class DefaultOpponent(OpponentDecisionPort):
    """
    Simple legality-respecting strategy.

    Claims the truth whenever the truth is legal. When forced to bluff it
    weighs how unlikely the standing claim is, how often the player has
    been caught lying, how aggressively the player has been claiming and
    how its own rounds have gone. Then it either calls the bluff or makes
    the smallest legal bluff.
    """

    CALL_THRESHOLD = 0.55
    _MEET = _meet_probability()

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.showdowns = 0
        self.caught_lies = 0
        self.raises_made = 0
        self.raises_called = 0
        self.rounds_played = 0
        self.rounds_lost = 0

    # -- Decisions -------------------------------------------------------

    def decide(
        self,
        challenge: int | None,
        roll: DiceRoll,
        history: Sequence[ClaimHistoryEntry],
    ) -> Decision:
        actual = roll.code
        if ClaimEngine.is_truthful_claim_legal(challenge, actual):
            return Raise(actual)

        if self.suspicion(challenge, history) >= self._call_threshold():
            return CallBluff()

        if ChallengeResolver.is_lockdown(challenge):
            return Raise(REVERSE if self._rng.random() < 0.5 else INFERNO)
        return Raise(ClaimEngine.next_higher_claim(challenge))

    def suspicion(
        self,
        challenge: int | None,
        history: Sequence[ClaimHistoryEntry] = (),
    ) -> float:
        """Estimated probability that the standing claim is a lie."""
        if challenge is None:
            return 0.0
        unlikely = 1.0 - self._MEET.get(challenge, 0.0)
        lie_rate = (self.caught_lies + 1) / (self.showdowns + 2)
        return 0.5 * unlikely + 0.3 * lie_rate + 0.2 * self._aggression(history)

    def _aggression(self, history: Sequence[ClaimHistoryEntry]) -> float:
        """Share of the player's recent claims that were doubles or specials."""
        claims = [
            entry.claim for entry in history
            if isinstance(entry, ClaimRecord) and entry.actor is Actor.PLAYER
        ]
        if not claims:
            return 0.5
        strong = sum(1 for c in claims if c % 11 == 0 or ClaimEngine.is_always_claimable(c))
        return strong / len(claims)

    def _call_threshold(self) -> float:
        threshold = self.CALL_THRESHOLD
        # A player who rarely calls us makes bluffing cheaper than calling.
        if self.raises_made:
            call_rate = self.raises_called / self.raises_made
            threshold += (0.5 - call_rate) * 0.2
        # Losing more rounds than winning: call sooner.
        loss_rate = (self.rounds_lost + 1) / (self.rounds_played + 2)
        return threshold - (loss_rate - 0.5) * 0.2

    # -- Learning hooks --------------------------------------------------

    def observe_showdown(self, claim: int, actual: int | None) -> None:
        self.showdowns += 1
        if ClaimEngine.resolve_bluff(claim, actual).liar_is_defender:
            self.caught_lies += 1

    def observe_raise_resolved(self, claim: int, actual: int, called: bool) -> None:
        self.raises_made += 1
        if called:
            self.raises_called += 1

    def observe_round_outcome(self, lost: bool) -> None:
        self.rounds_played += 1
        if lost:
            self.rounds_lost += 1

    def state(self) -> dict[str, Any]:
        return {
            "showdowns": self.showdowns,
            "caught_lies": self.caught_lies,
            "raises_made": self.raises_made,
            "raises_called": self.raises_called,
            "rounds_played": self.rounds_played,
            "rounds_lost": self.rounds_lost,
        }

    def load_state(self, blob: dict[str, Any]) -> None:
        for key in self.state():
            value = blob.get(key)
            if isinstance(value, int) and value >= 0:
                setattr(self, key, value)
