"""
Inferno Dice - Score Ledger

Applies point and streak changes and reports what they mean for the
session: elimination in quick play, a broken streak in survival.

Quick play: both sides start with the same score; a loss is clamped at
zero and reaching zero ends the game.
Survival: no shared score pool. Every round the player survives extends
the streak (+2 when it was won at Inferno stakes); the player's first loss
ends the run.
"""

from dataclasses import dataclass, field

from inferno.engine.base import Actor, GameMode
from inferno.engine.events import GameEvent
from inferno.engine.validators import validate_penalty, validate_score


@dataclass(frozen=True)
class LossOutcome:
    """
    Structured result of applying a loss.

    Attributes:
        loser: Who lost the round
        amount: Points (or stakes) lost
        finished: The game ended or the run's streak broke
        loser_score: Loser's quick-play score after the loss
        winner: Winner of the game when finished in quick play
        streak: Current (or final) survival streak
        streak_broken: The survival run ended on this loss
        best_streak: Best streak of the session after this loss
        new_best: This loss set a new session best
        beat_global_best: The broken run beat the known global best
        events: Lifecycle events for the host
    """
    loser: Actor
    amount: int
    finished: bool
    loser_score: int
    winner: Actor | None = None
    streak: int = 0
    streak_broken: bool = False
    best_streak: int = 0
    new_best: bool = False
    beat_global_best: bool = False
    events: tuple[GameEvent, ...] = field(default_factory=tuple)


class ScoreLedger:
    """Per-session scores, streak and bests."""

    def __init__(self, starting_score: int = 5, mode: GameMode = GameMode.QUICK_PLAY) -> None:
        self.starting_score = validate_score(starting_score)
        self.mode = mode
        self.scores: dict[Actor, int] = {}
        self.current_streak = 0
        self.best_streak = 0
        self.global_best = 0
        self.is_run_over = False
        self.reset_scores()

    def score(self, actor: Actor) -> int:
        return self.scores[actor]

    def reset_scores(self) -> None:
        """Start a fresh quick-play match."""
        self.scores = {actor: self.starting_score for actor in Actor}

    def start_run(self) -> None:
        """Start a fresh survival run. The session best is kept."""
        self.current_streak = 0
        self.is_run_over = False

    def note_global_best(self, streak: int) -> None:
        self.global_best = max(0, validate_score(streak))

    def apply_loss(self, actor: Actor, amount: int) -> LossOutcome:
        """Apply a round loss to actor.

        Args:
            actor: Who lost the round
            amount: Points lost (2 at Inferno stakes)

        Returns:
            LossOutcome describing the result

        Raises:
            ValueError: If amount is not a positive integer
        """
        validate_penalty(amount)
        if self.mode is GameMode.SURVIVAL:
            return self._apply_survival_loss(actor, amount)
        return self._apply_score_loss(actor, amount)

    def _apply_score_loss(self, actor: Actor, amount: int) -> LossOutcome:
        self.scores[actor] = max(0, self.scores[actor] - amount)
        loser_score = self.scores[actor]
        finished = loser_score == 0

        events = [GameEvent.POINTS_LOST]
        if finished:
            events.append(GameEvent.GAME_WON)

        return LossOutcome(
            loser=actor,
            amount=amount,
            finished=finished,
            loser_score=loser_score,
            winner=actor.other if finished else None,
            events=tuple(events),
        )

    def _apply_survival_loss(self, actor: Actor, amount: int) -> LossOutcome:
        if actor is Actor.PLAYER:
            final = self.current_streak
            new_best = final > self.best_streak
            self.best_streak = max(self.best_streak, final)
            self.is_run_over = True
            return LossOutcome(
                loser=actor,
                amount=amount,
                finished=True,
                loser_score=self.scores[actor],
                streak=final,
                streak_broken=True,
                best_streak=self.best_streak,
                new_best=new_best,
                beat_global_best=final > self.global_best,
                events=(GameEvent.STREAK_BROKEN,),
            )

        self.current_streak += 2 if amount >= 2 else 1
        new_best = self.current_streak > self.best_streak
        self.best_streak = max(self.best_streak, self.current_streak)
        return LossOutcome(
            loser=actor,
            amount=amount,
            finished=False,
            loser_score=self.scores[actor],
            streak=self.current_streak,
            best_streak=self.best_streak,
            new_best=new_best,
            events=(GameEvent.STREAK_EXTENDED,),
        )
