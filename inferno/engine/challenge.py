"""
Inferno Dice - Challenge Resolution

Works out which value the acting player must meet or beat. A Reverse (31)
does not set a new bar; it bounces the same challenge back, so the
original value is kept as the baseline and survives any number of reverses.
"""

from inferno.engine.base import LastAction
from inferno.engine.claims import INFERNO, REVERSE, SOCIAL, ClaimEngine


class ChallengeResolver:
    """Stateless helpers over the (baseline_claim, last_claim) pair."""

    @classmethod
    def resolve_active_challenge(
        cls,
        baseline_claim: int | None,
        last_claim: int | None,
    ) -> int | None:
        """The effective value to beat.

        After a Reverse the baseline applies, not the literal 31. A 31 with
        no baseline (played as an opener) stands as itself.
        """
        if last_claim == REVERSE and baseline_claim is not None:
            return baseline_claim
        return last_claim

    @classmethod
    def is_lockdown(cls, active_challenge: int | None) -> bool:
        """Inferno lockdown: only 21, 31 or a shown 41 may answer."""
        return ClaimEngine.is_mexican(active_challenge)

    @classmethod
    def next_baseline(
        cls,
        baseline_claim: int | None,
        previous_claim: int | None,
        claim: int,
    ) -> int | None:
        """Baseline after claim is declared over previous_claim.

        Cleared by a Social, carried through a Reverse, replaced otherwise.
        """
        if claim == SOCIAL:
            return None
        if claim == REVERSE:
            if baseline_claim is not None:
                return baseline_claim
            return previous_claim if ClaimEngine.is_challenge_claim(previous_claim) else None
        return claim

    @classmethod
    def next_last_action(cls, active_challenge: int | None, claim: int) -> LastAction:
        """A 31 answering an Inferno keeps the round at Inferno stakes."""
        if claim == REVERSE and active_challenge == INFERNO:
            return LastAction.REVERSE_VS_MEXICAN
        return LastAction.NORMAL

    @classmethod
    def build_claim_options(
        cls,
        previous_claim: int | None,
        player_roll: int | None = None,
    ) -> list[int]:
        """Legal values for the claim picker, weakest first.

        41 is never offered because it is shown rather than claimed. After a
        21 only 21 and 31 remain.

        Args:
            previous_claim: The resolved challenge (None at round start)
            player_roll: The picker owner's roll (unused by the ranking)

        Returns:
            Sorted list of selectable claim codes
        """
        options = []
        for candidate in ClaimEngine.enumerate_claims():
            if candidate == SOCIAL:
                continue
            if previous_claim is None:
                options.append(candidate)
            elif cls.is_lockdown(previous_claim):
                if ClaimEngine.is_always_claimable(candidate):
                    options.append(candidate)
            elif ClaimEngine.is_legal_raise(previous_claim, candidate):
                options.append(candidate)
        return options
