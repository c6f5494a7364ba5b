"""
Inferno Dice - Score Ledger Tests

Quick-play elimination and survival streak accounting.
"""

import pytest
from inferno.engine.base import Actor, GameMode
from inferno.engine.events import GameEvent
from inferno.engine.ledger import ScoreLedger


@pytest.fixture
def ledger():
    return ScoreLedger(starting_score=5)


@pytest.fixture
def survival():
    ledger = ScoreLedger(starting_score=5, mode=GameMode.SURVIVAL)
    ledger.start_run()
    return ledger


# === Quick Play ===


class TestQuickPlay:
    def test_starting_scores(self, ledger):
        assert ledger.score(Actor.PLAYER) == 5
        assert ledger.score(Actor.CPU) == 5

    def test_single_loss(self, ledger):
        outcome = ledger.apply_loss(Actor.PLAYER, 1)
        assert outcome.loser_score == 4
        assert outcome.finished is False
        assert outcome.winner is None
        assert outcome.events == (GameEvent.POINTS_LOST,)

    def test_clamps_at_zero(self, ledger):
        ledger.apply_loss(Actor.CPU, 2)
        ledger.apply_loss(Actor.CPU, 2)
        outcome = ledger.apply_loss(Actor.CPU, 2)
        assert outcome.loser_score == 0
        assert ledger.score(Actor.CPU) == 0

    @pytest.mark.parametrize("losses", [
        [1, 1, 1],
        [2, 2, 2, 2],
        [1, 2, 1, 2],
        [2, 1, 1, 1, 2, 2],
    ])
    def test_never_negative(self, losses):
        ledger = ScoreLedger(starting_score=5)
        previous = 5
        for amount in losses:
            outcome = ledger.apply_loss(Actor.PLAYER, amount)
            assert outcome.loser_score == max(0, previous - amount)
            previous = outcome.loser_score

    def test_five_losses_finish_game(self, ledger):
        for _ in range(4):
            assert ledger.apply_loss(Actor.PLAYER, 1).finished is False
        outcome = ledger.apply_loss(Actor.PLAYER, 1)
        assert outcome.finished is True
        assert outcome.winner is Actor.CPU
        assert outcome.events == (GameEvent.POINTS_LOST, GameEvent.GAME_WON)

    def test_inferno_loss_finishes_from_two(self, ledger):
        ledger.apply_loss(Actor.CPU, 2)
        ledger.apply_loss(Actor.CPU, 1)
        outcome = ledger.apply_loss(Actor.CPU, 2)
        assert outcome.finished
        assert outcome.winner is Actor.PLAYER

    def test_reset_scores(self, ledger):
        ledger.apply_loss(Actor.PLAYER, 2)
        ledger.reset_scores()
        assert ledger.score(Actor.PLAYER) == 5

    @pytest.mark.parametrize("amount", [0, -1])
    def test_rejects_bad_amount(self, ledger, amount):
        with pytest.raises(ValueError):
            ledger.apply_loss(Actor.PLAYER, amount)


# === Survival ===


class TestSurvival:
    def test_cpu_loss_extends_streak(self, survival):
        outcome = survival.apply_loss(Actor.CPU, 1)
        assert outcome.streak == 1
        assert outcome.finished is False
        assert outcome.events == (GameEvent.STREAK_EXTENDED,)

    def test_inferno_win_counts_double(self, survival):
        assert survival.apply_loss(Actor.CPU, 2).streak == 2

    def test_scores_untouched(self, survival):
        survival.apply_loss(Actor.CPU, 2)
        assert survival.score(Actor.CPU) == 5

    def test_player_loss_breaks_streak(self, survival):
        survival.apply_loss(Actor.CPU, 1)
        survival.apply_loss(Actor.CPU, 1)
        outcome = survival.apply_loss(Actor.PLAYER, 1)
        assert outcome.finished is True
        assert outcome.streak_broken is True
        assert outcome.streak == 2
        assert survival.is_run_over is True
        assert outcome.events == (GameEvent.STREAK_BROKEN,)

    def test_best_streak_kept_across_runs(self, survival):
        for _ in range(3):
            survival.apply_loss(Actor.CPU, 1)
        survival.apply_loss(Actor.PLAYER, 1)
        survival.start_run()
        survival.apply_loss(Actor.CPU, 1)
        outcome = survival.apply_loss(Actor.PLAYER, 1)
        assert outcome.streak == 1
        assert outcome.best_streak == 3
        assert outcome.new_best is False

    def test_new_best_flag(self, survival):
        outcome = survival.apply_loss(Actor.CPU, 1)
        assert outcome.new_best is True

    def test_beat_global_best(self, survival):
        survival.note_global_best(2)
        for _ in range(3):
            survival.apply_loss(Actor.CPU, 1)
        assert survival.apply_loss(Actor.PLAYER, 1).beat_global_best is True

    def test_below_global_best(self, survival):
        survival.note_global_best(10)
        survival.apply_loss(Actor.CPU, 1)
        assert survival.apply_loss(Actor.PLAYER, 1).beat_global_best is False

    def test_start_run_resets(self, survival):
        survival.apply_loss(Actor.CPU, 1)
        survival.apply_loss(Actor.PLAYER, 1)
        survival.start_run()
        assert survival.current_streak == 0
        assert survival.is_run_over is False
