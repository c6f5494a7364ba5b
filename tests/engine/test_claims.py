"""
Inferno Dice - Claim Engine Tests

Ranking, legality and bluff resolution for two-dice claims.
"""

import random

import pytest
from inferno.engine.base import ClaimCategory, DiceRoll
from inferno.engine.claims import INFERNO, REVERSE, SOCIAL, ClaimEngine

ALL_FACES = [(d1, d2) for d1 in range(1, 7) for d2 in range(1, 7)]
ORDINARY = [c for c in ClaimEngine.enumerate_claims() if c not in (INFERNO, REVERSE, SOCIAL)]


# === Rolling and Normalization ===


class TestRollDice:
    """Tests for ClaimEngine.roll_dice()."""

    def test_returns_dice_roll(self):
        assert isinstance(ClaimEngine.roll_dice(), DiceRoll)

    def test_value_range(self):
        """Roll 200 times; every face should be 1-6."""
        for _ in range(200):
            roll = ClaimEngine.roll_dice()
            assert all(1 <= v <= 6 for v in roll.values)

    def test_seeded_rng_is_deterministic(self):
        a = [ClaimEngine.roll_dice(random.Random(3)).values for _ in range(5)]
        b = [ClaimEngine.roll_dice(random.Random(3)).values for _ in range(5)]
        assert a == b


class TestNormalizeRoll:
    @pytest.mark.parametrize("d1,d2,expected", [
        (3, 5, 53),
        (5, 3, 53),
        (1, 1, 11),
        (6, 6, 66),
        (1, 2, 21),
        (1, 3, 31),
        (4, 1, 41),
    ])
    def test_larger_face_first(self, d1, d2, expected):
        assert ClaimEngine.normalize_roll(d1, d2) == expected

    @pytest.mark.parametrize("d1,d2", ALL_FACES)
    def test_split_inverts_normalize(self, d1, d2):
        code = ClaimEngine.normalize_roll(d1, d2)
        assert ClaimEngine.split_claim(code) == (max(d1, d2), min(d1, d2))

    def test_rejects_bad_face(self):
        with pytest.raises(ValueError):
            ClaimEngine.normalize_roll(0, 3)

    def test_every_roll_is_a_claim(self):
        codes = {ClaimEngine.normalize_roll(d1, d2) for d1, d2 in ALL_FACES}
        assert codes == set(ClaimEngine.enumerate_claims())


class TestSplitClaim:
    @pytest.mark.parametrize("code,expected", [(21, (2, 1)), (31, (3, 1)), (41, (4, 1))])
    def test_specials_split_literally(self, code, expected):
        assert ClaimEngine.split_claim(code) == expected

    def test_invalid_code(self):
        with pytest.raises(ValueError):
            ClaimEngine.split_claim(12)


# === Classification ===


class TestCategorize:
    @pytest.mark.parametrize("code", [21, 31, 41])
    def test_special(self, code):
        assert ClaimEngine.categorize_claim(code) == ClaimCategory.SPECIAL

    @pytest.mark.parametrize("code", [11, 33, 66])
    def test_double(self, code):
        assert ClaimEngine.categorize_claim(code) == ClaimCategory.DOUBLE

    @pytest.mark.parametrize("code", [32, 53, 65])
    def test_mixed(self, code):
        assert ClaimEngine.categorize_claim(code) == ClaimCategory.MIXED


class TestPredicates:
    @pytest.mark.parametrize("code,expected", [
        (53, True),
        (21, True),
        (12, False),
        (0, False),
        (77, False),
        (True, False),
        ("53", False),
        (None, False),
    ])
    def test_is_valid_claim(self, code, expected):
        assert ClaimEngine.is_valid_claim(code) is expected

    @pytest.mark.parametrize("code", [21, 31, 41])
    def test_specials_always_claimable(self, code):
        assert ClaimEngine.is_always_claimable(code)

    @pytest.mark.parametrize("code", [66, 11, 65, None])
    def test_ordinary_not_always_claimable(self, code):
        assert not ClaimEngine.is_always_claimable(code)

    def test_is_mexican(self):
        assert ClaimEngine.is_mexican(21)
        assert not ClaimEngine.is_mexican(31)
        assert not ClaimEngine.is_mexican(None)

    def test_challenge_claims(self):
        assert ClaimEngine.is_challenge_claim(54)
        assert ClaimEngine.is_challenge_claim(21)
        assert not ClaimEngine.is_challenge_claim(41)
        assert not ClaimEngine.is_challenge_claim(None)

    def test_reverse_of(self):
        assert ClaimEngine.is_reverse_of(54, 31)
        assert ClaimEngine.is_reverse_of(21, 31)
        assert not ClaimEngine.is_reverse_of(None, 31)
        assert not ClaimEngine.is_reverse_of(54, 21)


# === Ordering ===


class TestCompareClaims:
    def test_doubles_beat_mixed(self):
        assert ClaimEngine.compare_claims(11, 65) > 0
        assert ClaimEngine.compare_claims(65, 11) < 0

    def test_mixed_numeric_order(self):
        for lower, higher in zip(ORDINARY[:12], ORDINARY[1:12]):
            assert lower < higher
            assert ClaimEngine.compare_claims(higher, lower) == 1

    def test_doubles_numeric_order(self):
        assert ClaimEngine.compare_claims(66, 55) == 1
        assert ClaimEngine.compare_claims(22, 11) == 1

    @pytest.mark.parametrize("ordinary", ORDINARY)
    def test_specials_outrank_ordinary(self, ordinary):
        assert ClaimEngine.compare_claims(REVERSE, ordinary) == 1
        assert ClaimEngine.compare_claims(INFERNO, ordinary) == 1

    def test_inferno_is_top(self):
        assert ClaimEngine.compare_claims(INFERNO, REVERSE) == 1

    def test_equal(self):
        assert ClaimEngine.compare_claims(54, 54) == 0

    def test_total_order(self):
        claims = ClaimEngine.enumerate_claims()
        for a in claims:
            for b in claims:
                assert ClaimEngine.compare_claims(a, b) == -ClaimEngine.compare_claims(b, a)

    def test_meets_or_beats(self):
        assert ClaimEngine.meets_or_beats(54, 54)
        assert ClaimEngine.meets_or_beats(61, 54)
        assert not ClaimEngine.meets_or_beats(53, 54)


class TestEnumerateClaims:
    def test_count(self):
        assert len(ClaimEngine.enumerate_claims()) == 21

    def test_weakest_first(self):
        claims = ClaimEngine.enumerate_claims()
        for weaker, stronger in zip(claims, claims[1:]):
            assert ClaimEngine.compare_claims(stronger, weaker) == 1

    def test_ends_with_specials(self):
        assert ClaimEngine.enumerate_claims()[-2:] == [REVERSE, INFERNO]


# === Legality ===


class TestIsLegalRaise:
    @pytest.mark.parametrize("candidate", ClaimEngine.enumerate_claims())
    def test_anything_opens(self, candidate):
        assert ClaimEngine.is_legal_raise(None, candidate)

    def test_must_meet_or_beat(self):
        assert ClaimEngine.is_legal_raise(54, 54)
        assert ClaimEngine.is_legal_raise(54, 61)
        assert not ClaimEngine.is_legal_raise(54, 53)

    @pytest.mark.parametrize("special", [21, 31, 41])
    def test_specials_always_legal(self, special):
        assert ClaimEngine.is_legal_raise(66, special)

    def test_claim_matches_roll(self):
        assert ClaimEngine.claim_matches_roll(SOCIAL, SOCIAL)
        assert not ClaimEngine.claim_matches_roll(SOCIAL, 65)
        assert ClaimEngine.claim_matches_roll(66, 32)


class TestTruthfulClaimLegal:
    def test_open_round(self):
        assert ClaimEngine.is_truthful_claim_legal(None, 32)

    def test_weaker_roll_must_bluff(self):
        assert not ClaimEngine.is_truthful_claim_legal(54, 32)

    def test_stronger_roll_is_fine(self):
        assert ClaimEngine.is_truthful_claim_legal(54, 11)

    def test_ordinary_roll_cannot_answer_inferno(self):
        assert not ClaimEngine.is_truthful_claim_legal(21, 66)

    @pytest.mark.parametrize("special", [21, 31, 41])
    def test_specials_always_truthful(self, special):
        assert ClaimEngine.is_truthful_claim_legal(21, special)


class TestNextHigherClaim:
    @pytest.mark.parametrize("value,expected", [
        (None, 32),
        (41, 32),
        (32, 42),
        (54, 61),
        (65, 11),
        (55, 66),
        (66, 21),
        (31, 21),
        (21, 21),
    ])
    def test_minimal_bluff(self, value, expected):
        assert ClaimEngine.next_higher_claim(value) == expected

    @pytest.mark.parametrize("value", ORDINARY)
    def test_result_is_legal(self, value):
        assert ClaimEngine.is_legal_raise(value, ClaimEngine.next_higher_claim(value))


# === Bluff Resolution ===


class TestResolveBluff:
    def test_exact_truth(self):
        outcome = ClaimEngine.resolve_bluff(54, 54)
        assert outcome.defender_told_truth
        assert outcome.penalty == 1

    def test_underclaim_is_truth(self):
        assert ClaimEngine.resolve_bluff(54, 65).defender_told_truth

    def test_overclaim_is_lie(self):
        outcome = ClaimEngine.resolve_bluff(54, 32)
        assert outcome.liar_is_defender
        assert outcome.penalty == 1

    def test_inferno_truth_costs_two(self):
        outcome = ClaimEngine.resolve_bluff(21, 21)
        assert outcome.defender_told_truth
        assert outcome.penalty == 2

    def test_inferno_bluff_costs_two(self):
        outcome = ClaimEngine.resolve_bluff(21, 66)
        assert outcome.liar_is_defender
        assert outcome.penalty == 2

    def test_specials_must_match(self):
        assert ClaimEngine.resolve_bluff(31, 21).liar_is_defender

    def test_reverse_roll_does_not_back_ordinary_claim(self):
        assert ClaimEngine.resolve_bluff(66, 31).liar_is_defender

    @pytest.mark.parametrize("actual", [31, 65, 11])
    def test_reverse_keeps_inferno_penalty(self, actual):
        outcome = ClaimEngine.resolve_bluff(31, actual, was_reverse_vs_mexican=True)
        assert outcome.penalty == 2

    def test_plain_reverse_penalty(self):
        assert ClaimEngine.resolve_bluff(31, 31).penalty == 1

    def test_unknown_roll_is_lie(self):
        assert ClaimEngine.resolve_bluff(54, None).liar_is_defender

    def test_invalid_claim_raises(self):
        with pytest.raises(ValueError):
            ClaimEngine.resolve_bluff(12, 54)
