"""
Inferno Dice - Claim Engine

Ranking and legality rules for two-dice claims.

Game Rules:
- Two dice are read as a two-digit number, larger face first (3 and 5 -> 53)
- Doubles beat every mixed roll (11 beats 65)
- 21 "Inferno" is the top claim and doubles the stakes of the round
- 31 "Reverse" reflects the standing challenge back to the previous claimant
- 41 "Social" must be shown, can never be bluffed, and resets the round

All methods are stateless class methods. No state, no I/O.
"""

import random
from typing import ClassVar

from inferno.engine.base import ClaimCategory, DiceRoll, RoundOutcome
from inferno.engine.validators import validate_claim_code, validate_die_face

INFERNO = 21
REVERSE = 31
SOCIAL = 41

SPECIAL_CLAIMS = frozenset({INFERNO, REVERSE, SOCIAL})


def _ranked_claims() -> tuple[int, ...]:
    """Every claim code from weakest to strongest."""
    mixed = [
        hi * 10 + lo
        for hi in range(2, 7)
        for lo in range(1, hi)
        if hi * 10 + lo not in SPECIAL_CLAIMS
    ]
    doubles = [d * 11 for d in range(1, 7)]
    # Social is show-only and carries no magnitude, so it sits at the bottom.
    return (SOCIAL, *mixed, *doubles, REVERSE, INFERNO)


class ClaimEngine:
    """
    Stateless rule engine for Inferno Dice claims.

    All methods are class methods operating on plain claim codes.
    """

    CLAIM_ORDER: ClassVar[tuple[int, ...]] = _ranked_claims()
    _RANK: ClassVar[dict[int, int]] = {code: i for i, code in enumerate(CLAIM_ORDER)}

    @classmethod
    def roll_dice(cls, rng: random.Random | None = None) -> DiceRoll:
        """Roll two D6.

        Args:
            rng: Optional random source (for deterministic play)

        Returns:
            DiceRoll with two random faces
        """
        source = rng or random
        return DiceRoll(values=(source.randint(1, 6), source.randint(1, 6)))

    @classmethod
    def normalize_roll(cls, d1: int, d2: int) -> int:
        """Read two faces as a claim code, larger face as the tens digit."""
        validate_die_face(d1)
        validate_die_face(d2)
        return max(d1, d2) * 10 + min(d1, d2)

    @classmethod
    def split_claim(cls, code: int) -> tuple[int, int]:
        """Inverse of normalize_roll: (high face, low face).

        Specials split into their literal digits for display only.
        """
        cls.validate(code)
        return code // 10, code % 10

    @classmethod
    def is_valid_claim(cls, code: object) -> bool:
        """True when code is a representable claim."""
        return isinstance(code, int) and not isinstance(code, bool) and code in cls._RANK

    @classmethod
    def validate(cls, code: int) -> int:
        """Raise ValueError unless code is a representable claim."""
        return validate_claim_code(code, cls._RANK)

    @classmethod
    def categorize_claim(cls, code: int) -> ClaimCategory:
        cls.validate(code)
        if code in SPECIAL_CLAIMS:
            return ClaimCategory.SPECIAL
        hi, lo = divmod(code, 10)
        return ClaimCategory.DOUBLE if hi == lo else ClaimCategory.MIXED

    @classmethod
    def is_always_claimable(cls, code: int | None) -> bool:
        """21, 31 and 41 may be declared whatever the standing challenge."""
        return code in SPECIAL_CLAIMS

    @classmethod
    def is_mexican(cls, code: int | None) -> bool:
        return code == INFERNO

    @classmethod
    def is_challenge_claim(cls, code: int | None) -> bool:
        """True for a standing claim that a Reverse can be played against."""
        return code is not None and code != SOCIAL and cls.is_valid_claim(code)

    @classmethod
    def is_reverse_of(cls, previous: int | None, candidate: int | None) -> bool:
        return candidate == REVERSE and cls.is_challenge_claim(previous)

    @classmethod
    def compare_claims(cls, a: int, b: int) -> int:
        """Total order on claims: -1 if a < b, 0 if equal, 1 if a > b.

        Category dominates (mixed < double < 31 < 21); within mixed and
        doubles the higher number wins.
        """
        rank_a = cls._RANK[cls.validate(a)]
        rank_b = cls._RANK[cls.validate(b)]
        return (rank_a > rank_b) - (rank_a < rank_b)

    @classmethod
    def meets_or_beats(cls, candidate: int, previous: int) -> bool:
        return cls.compare_claims(candidate, previous) >= 0

    @classmethod
    def is_legal_raise(cls, active_challenge: int | None, candidate: int) -> bool:
        """Whether candidate may be declared over the active challenge."""
        if active_challenge is None:
            return True
        if cls.is_always_claimable(candidate):
            return True
        return cls.meets_or_beats(candidate, active_challenge)

    @classmethod
    def claim_matches_roll(cls, claim: int, actual_roll: int | None) -> bool:
        """A Social may only be claimed by whoever actually rolled it."""
        if claim == SOCIAL:
            return actual_roll == SOCIAL
        return True

    @classmethod
    def is_truthful_claim_legal(cls, active_challenge: int | None, actual: int) -> bool:
        """Whether the actor may simply declare what they rolled."""
        if cls.is_always_claimable(actual):
            return True
        if active_challenge is None:
            return True
        if cls.is_reverse_of(active_challenge, actual):
            return True
        return cls.meets_or_beats(actual, active_challenge)

    @classmethod
    def next_higher_claim(cls, value: int | None) -> int:
        """Smallest ordinary claim strictly above value, else 21.

        Used to fabricate a minimal legal bluff.
        """
        floor = -1 if value is None else cls._RANK[cls.validate(value)]
        for code in cls.CLAIM_ORDER[floor + 1:]:
            if code not in SPECIAL_CLAIMS:
                return code
        return INFERNO

    @classmethod
    def enumerate_claims(cls) -> list[int]:
        """All representable claim codes, weakest first."""
        return list(cls.CLAIM_ORDER)

    @classmethod
    def resolve_bluff(
        cls,
        claim: int,
        actual_roll: int | None,
        was_reverse_vs_mexican: bool = False,
    ) -> RoundOutcome:
        """Settle a bluff call against the standing claim.

        The claimant told the truth when the dice show the claim, or show an
        ordinary roll (or 21) that meets or beats an ordinary claim. Specials
        must match exactly. The penalty is 2 when the chain involved a 21,
        including a Reverse played against a 21.

        Args:
            claim: The standing claim being challenged
            actual_roll: The defender's real roll code (None if unknown)
            was_reverse_vs_mexican: The claim is a 31 played against a 21

        Returns:
            RoundOutcome naming the liar and the penalty
        """
        cls.validate(claim)
        penalty = 2 if claim == INFERNO or was_reverse_vs_mexican else 1

        if actual_roll is None or not cls.is_valid_claim(actual_roll):
            return RoundOutcome(liar_is_defender=True, penalty=penalty)
        if actual_roll == claim:
            return RoundOutcome(liar_is_defender=False, penalty=penalty)
        if claim in SPECIAL_CLAIMS or actual_roll in (REVERSE, SOCIAL):
            return RoundOutcome(liar_is_defender=True, penalty=penalty)

        justified = cls.meets_or_beats(actual_roll, claim)
        return RoundOutcome(liar_is_defender=not justified, penalty=penalty)
