"""
Inferno Dice - Round State Machine

Sequences a session of rounds between the human player and the CPU:

    AWAITING_ROLL(actor) -> AWAITING_CLAIM(actor) -> AWAITING_RESPONSE(other)
        -> AWAITING_ROLL(other) ...

A bluff call, a shown Social or a forfeited Inferno resolves the round
inside the same transition: a ROUND_RESOLVED event is emitted and the
machine rests in AWAITING_ROLL(next opener), GAME_OVER or STREAK_BROKEN.

Entry points mutate in-memory state only and return a list of effects
(telemetry, persistence, notifications, CPU-turn scheduling) for an effect
runner to carry out. Illegal actions never raise: they leave the state
untouched and either log at debug level or set the narration message.

A cooperative turn lock is held for the length of every transition,
including the CPU's thinking delay, so a second tap from the host cannot
interleave with a transition already in flight.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

from inferno.engine import narration
from inferno.engine.base import (
    Actor,
    ClaimHistoryEntry,
    ClaimRecord,
    DiceRoll,
    EventRecord,
    GameConfig,
    GameMode,
    LastAction,
    Phase,
    ScoreChange,
)
from inferno.engine.challenge import ChallengeResolver
from inferno.engine.claims import INFERNO, SOCIAL, ClaimEngine
from inferno.engine.effects import (
    CpuTurnToken,
    Effect,
    FetchGlobalBest,
    Notify,
    RecordClaim,
    RecordOutcome,
    RecordRoll,
    RecordRun,
    SaveOpponentState,
    ScheduleCpuTurn,
    SubmitGlobalBest,
    UpdateRank,
)
from inferno.engine.events import EventPayload, GameEvent
from inferno.engine.ledger import LossOutcome, ScoreLedger
from inferno.engine.opponent import CallBluff, Decision, DefaultOpponent, OpponentDecisionPort, Raise

logger = logging.getLogger(__name__)

Roller = Callable[[], DiceRoll]

# Survival ramp: below the calm streak the CPU never calls bluff, inside the
# soft band it keeps a call only some of the time.
SURVIVAL_CALM_STREAK = 5
SURVIVAL_SOFT_STREAK = 8
SURVIVAL_SOFT_CALL_RATE = 0.4

_WELCOME = {
    GameMode.QUICK_PLAY: "Welcome to Inferno Dice!",
    GameMode.SURVIVAL: "Survive as long as you can in Inferno Mode.",
}


@dataclass(frozen=True)
class PendingCpuRaise:
    """The CPU's last raise, not yet accepted or contested by the player."""
    claim: int
    actual: int


class RoundStateMachine:
    """
    Turn-by-turn rules for one table.

    Attributes:
        session_id: Identifies this table; stale CPU turns are keyed by it
        epoch: Bumped on every lifecycle reset (new game, run start/stop)
        round_index: Bumped on every round reset
        turn: Whose move it is
        last_claim: The literal standing claim
        baseline_claim: The contested value preserved across reverses
        last_action: Whether the standing 31 answered an Inferno
        game_over: Winner of a finished quick-play game
    """

    def __init__(
        self,
        opponent: OpponentDecisionPort | None = None,
        *,
        config: GameConfig | None = None,
        roller: Roller | None = None,
        rng: random.Random | None = None,
        session_id: str | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self._rng = rng or random.Random()
        self.opponent = opponent or DefaultOpponent(self._rng)
        self._roller = roller or (lambda: ClaimEngine.roll_dice(self._rng))
        self.session_id = session_id or uuid.uuid4().hex

        self.epoch = 0
        self.round_index = 0
        self.ledger = ScoreLedger(self.config.starting_score)
        self._claims: dict[GameMode, deque[ClaimHistoryEntry]] = {
            mode: deque(maxlen=self.config.history_size) for mode in GameMode
        }
        self._score_history: dict[GameMode, deque[ScoreChange]] = {
            mode: deque(maxlen=self.config.score_history_size) for mode in GameMode
        }
        self._messages = dict(_WELCOME)

        self.turn = Actor.PLAYER
        self.game_over: Actor | None = None
        self.turn_lock = False
        self.is_busy = False
        self.pending_inferno_delay = False
        self.bluff_events = 0
        self.correct_bluff_events = 0
        self.last_bluff_caller: Actor | None = None
        self.last_bluff_defender_truth: bool | None = None
        self._clear_round()

    # -- Observables -----------------------------------------------------

    @property
    def mode(self) -> GameMode:
        return self.ledger.mode

    @property
    def active_challenge(self) -> int | None:
        """The value the acting player must meet or beat."""
        return ChallengeResolver.resolve_active_challenge(self.baseline_claim, self.last_claim)

    @property
    def message(self) -> str:
        return self._messages[self.mode]

    @property
    def history(self) -> tuple[ClaimHistoryEntry, ...]:
        """Recent claims and events for the current mode, oldest first."""
        return tuple(self._claims[self.mode])

    @property
    def score_history(self) -> tuple[ScoreChange, ...]:
        return tuple(self._score_history[self.mode])

    @property
    def last_player_roll(self) -> int | None:
        return self._rolls[Actor.PLAYER]

    @property
    def last_cpu_roll(self) -> int | None:
        return self._rolls[Actor.CPU]

    @property
    def player_score(self) -> int:
        return self.ledger.score(Actor.PLAYER)

    @property
    def cpu_score(self) -> int:
        return self.ledger.score(Actor.CPU)

    @property
    def current_streak(self) -> int:
        return self.ledger.current_streak

    @property
    def best_streak(self) -> int:
        return self.ledger.best_streak

    @property
    def global_best(self) -> int:
        return self.ledger.global_best

    @property
    def is_survival_over(self) -> bool:
        return self.mode is GameMode.SURVIVAL and self.ledger.is_run_over

    @property
    def is_finished(self) -> bool:
        if self.mode is GameMode.SURVIVAL:
            return self.ledger.is_run_over
        return self.game_over is not None

    @property
    def phase(self) -> Phase:
        if self.is_survival_over:
            return Phase.STREAK_BROKEN
        if self.is_finished:
            return Phase.GAME_OVER
        if self._rolls[self.turn] is not None:
            return Phase.AWAITING_CLAIM
        if self.last_claim is not None:
            return Phase.AWAITING_RESPONSE
        return Phase.AWAITING_ROLL

    def build_banner(self) -> str:
        if ClaimEngine.is_mexican(self.last_claim):
            return narration.inferno_banner(self.turn)
        return self.message

    def build_claim_options(self) -> list[int]:
        """Claim picker values for whoever is on turn."""
        return ChallengeResolver.build_claim_options(self.active_challenge, self._rolls[self.turn])

    def cpu_turn_token(self) -> CpuTurnToken:
        return CpuTurnToken(self.session_id, self.epoch, self.round_index)

    def note_global_best(self, streak: int) -> None:
        self.ledger.note_global_best(streak)

    def snapshot(self) -> dict[str, Any]:
        """Read-only view of everything a host renders."""
        return {
            "mode": self.mode.value,
            "phase": self.phase.name,
            "turn": self.turn.value,
            "active_challenge": self.active_challenge,
            "last_claim": self.last_claim,
            "baseline_claim": self.baseline_claim,
            "last_player_roll": self.last_player_roll,
            "last_cpu_roll": self.last_cpu_roll,
            "must_bluff": self.must_bluff,
            "banner": self.build_banner(),
            "player_score": self.player_score,
            "cpu_score": self.cpu_score,
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "global_best": self.global_best,
            "game_over": self.game_over.value if self.game_over else None,
            "is_survival_over": self.is_survival_over,
            "is_busy": self.is_busy,
        }

    # -- Lifecycle -------------------------------------------------------

    def new_game(self) -> list[Effect]:
        """Start a fresh quick-play match."""
        self._begin_session(GameMode.QUICK_PLAY)
        self.game_over = None
        self.ledger.reset_scores()
        self._claims[GameMode.QUICK_PLAY].clear()
        self._score_history[GameMode.QUICK_PLAY].clear()
        self._set_message("New game. Good luck!")
        return [self._notify(GameEvent.GAME_STARTED, mode=self.mode.value)]

    def start_run(self) -> list[Effect]:
        """Enter survival mode with a fresh run."""
        effects = self.restart_run()
        effects.append(FetchGlobalBest())
        return effects

    def restart_run(self) -> list[Effect]:
        """Begin a new survival run, keeping the session best."""
        self._begin_session(GameMode.SURVIVAL)
        self.ledger.start_run()
        self._claims[GameMode.SURVIVAL].clear()
        self._score_history[GameMode.SURVIVAL].clear()
        self._set_message(_WELCOME[GameMode.SURVIVAL])
        return [self._notify(GameEvent.RUN_STARTED, mode=self.mode.value)]

    def stop_run(self) -> list[Effect]:
        """Leave survival mode and return to quick play."""
        streak = self.ledger.current_streak
        self.epoch += 1
        self._clear_round()
        self.ledger.start_run()
        self.ledger.mode = GameMode.QUICK_PLAY
        self.turn = Actor.PLAYER
        self.turn_lock = False
        self.is_busy = False
        self.pending_inferno_delay = False
        return [self._notify(GameEvent.RUN_STOPPED, streak=streak)]

    def _begin_session(self, mode: GameMode) -> None:
        self.epoch += 1
        self.round_index = 0
        self.ledger.mode = mode
        self._clear_round()
        self.turn = Actor.PLAYER
        self.turn_lock = False
        self.is_busy = False
        self.pending_inferno_delay = False
        self.bluff_events = 0
        self.correct_bluff_events = 0
        self.last_bluff_caller = None
        self.last_bluff_defender_truth = None

    def _clear_round(self) -> None:
        self.last_claim: int | None = None
        self.baseline_claim: int | None = None
        self.last_action = LastAction.NORMAL
        self.last_claimant: Actor | None = None
        self._rolls: dict[Actor, int | None] = {actor: None for actor in Actor}
        self._dice: dict[Actor, DiceRoll | None] = {actor: None for actor in Actor}
        self.must_bluff = False
        self.pending_cpu_raise: PendingCpuRaise | None = None
        self.cpu_social_dice: DiceRoll | None = None

    def _reset_round(self) -> None:
        self.round_index += 1
        self._clear_round()

    # -- Player-facing actions -------------------------------------------

    def roll(self, actor: Actor = Actor.PLAYER) -> list[Effect]:
        """Roll the dice for actor; a no-op out of turn or while locked."""
        if not self._can_act(actor, "roll"):
            return []
        if self._rolls[actor] is not None:
            logger.debug("Ignoring roll by %s: a roll is already pending", actor.value)
            return []

        effects: list[Effect] = []
        if actor is Actor.PLAYER:
            effects += self._settle_pending_cpu_raise(called=False)

        self._begin_lock()
        try:
            effects += self._roll_for(actor)
        finally:
            self._end_lock()
        return effects

    def claim(self, actor: Actor, value: int) -> list[Effect]:
        """Declare value over the resolved challenge.

        Failing to answer a standing Inferno with 21, 31 or 41 is not
        rejected: it costs the actor 2 points and resolves the round.
        """
        if not self._can_act(actor, "claim"):
            return []
        actual = self._rolls[actor]
        if actual is None:
            self._set_message("Roll before you claim.")
            return []
        if not ClaimEngine.is_valid_claim(value):
            self._set_message("Choose a valid claim.")
            return []

        effects: list[Effect] = []
        if actor is Actor.PLAYER:
            effects += self._settle_pending_cpu_raise(called=False)

        self._begin_lock()
        self.is_busy = True
        try:
            challenge = self.active_challenge
            if ChallengeResolver.is_lockdown(challenge) and not ClaimEngine.is_always_claimable(value):
                effects += self._forfeit_inferno(actor)
            elif not ClaimEngine.is_legal_raise(challenge, value):
                self._set_message(f"Claim {value} must beat {challenge}.")
            elif not ClaimEngine.claim_matches_roll(value, actual):
                self._set_message("41 is Social and must be shown, not bluffed.")
            else:
                effects += self._commit_claim(actor, value, actual)
        finally:
            self.is_busy = False
            self._end_lock()
        return effects

    def call_bluff(self, actor: Actor = Actor.PLAYER) -> list[Effect]:
        """Challenge the standing claim made by the other actor."""
        if not self._can_act(actor, "call bluff"):
            return []
        if self.last_claim is None or self.last_claimant is not actor.other:
            self._set_message("No claim to challenge yet.")
            return []

        effects: list[Effect] = []
        if actor is Actor.PLAYER:
            effects += self._settle_pending_cpu_raise(called=True)

        self._begin_lock()
        self.is_busy = True
        try:
            effects += self._resolve_call(actor)
        finally:
            self.is_busy = False
            self._end_lock()
        return effects

    # -- CPU turn --------------------------------------------------------

    async def cpu_turn(self, token: CpuTurnToken | None = None) -> list[Effect]:
        """Think, roll, and act for the CPU.

        The turn lock is held through the thinking delay. A turn whose
        token no longer matches the table (new game, round moved on) is
        discarded.
        """
        token = token or self.cpu_turn_token()
        if not self._cpu_turn_is_live(token):
            logger.debug("Skipping CPU turn for %s: not live", token)
            return []
        if self.turn_lock:
            logger.debug("Skipping CPU turn: turn locked")
            return []

        tense = self.pending_inferno_delay or self._is_close_game()
        self.pending_inferno_delay = False
        delay = self.config.tense_delay if tense else self.config.think_delay

        self._begin_lock()
        self.is_busy = True
        try:
            await asyncio.sleep(delay)
            if not self._cpu_turn_is_live(token):
                logger.info("Discarding stale CPU turn for round %d", token.round_index)
                return []
            return self._cpu_act()
        finally:
            # A lifecycle reset already released the lock for the new session.
            if token.session_id == self.session_id and token.epoch == self.epoch:
                self.is_busy = False
                self._end_lock()

    def _cpu_act(self) -> list[Effect]:
        effects = self._roll_for(Actor.CPU)
        actual = self._rolls[Actor.CPU]

        if actual == SOCIAL:
            return effects + self._commit_claim(Actor.CPU, SOCIAL, actual)

        challenge = self.active_challenge
        decision = self._decide(challenge, self._dice[Actor.CPU])

        if isinstance(decision, CallBluff) and self.mode is GameMode.SURVIVAL:
            if not self._keep_survival_call():
                decision = Raise(None)

        if isinstance(decision, CallBluff):
            if self.last_claim is not None and self.last_claimant is Actor.PLAYER:
                return effects + self._resolve_call(Actor.CPU)
            decision = Raise(None)

        claim = self._coerce_cpu_claim(challenge, decision.claim, actual)
        return effects + self._commit_claim(Actor.CPU, claim, actual)

    def _decide(self, challenge: int | None, dice: DiceRoll) -> Decision:
        try:
            decision = self.opponent.decide(challenge, dice, self.history)
        except Exception:
            logger.exception("Opponent decision failed; using the engine's own claim")
            return Raise(None)
        if not isinstance(decision, (Raise, CallBluff)):
            logger.warning("Opponent returned malformed decision %r", decision)
            return Raise(None)
        return decision

    def _keep_survival_call(self) -> bool:
        streak = self.ledger.current_streak
        if streak < SURVIVAL_CALM_STREAK:
            return False
        if streak < SURVIVAL_SOFT_STREAK:
            return self._rng.random() < SURVIVAL_SOFT_CALL_RATE
        return True

    def _coerce_cpu_claim(self, challenge: int | None, suggested: int | None, actual: int) -> int:
        """Force the CPU's suggestion onto a legal claim.

        The truthful roll when it is legal, otherwise the minimal legal
        bluff; Inferno lockdown is re-applied regardless of the strategy.
        """
        legal_truth = ClaimEngine.is_truthful_claim_legal(challenge, actual)
        fallback = actual if legal_truth else ClaimEngine.next_higher_claim(challenge)

        claim = suggested
        if claim is None or not ClaimEngine.is_valid_claim(claim):
            claim = fallback
        if not ClaimEngine.claim_matches_roll(claim, actual):
            claim = fallback

        if ChallengeResolver.is_lockdown(challenge):
            if not ClaimEngine.is_always_claimable(claim):
                claim = actual if ClaimEngine.is_always_claimable(actual) else INFERNO
        elif not ClaimEngine.is_legal_raise(challenge, claim):
            claim = fallback

        if claim != suggested:
            logger.debug("Coerced CPU claim %s -> %s (challenge=%s)", suggested, claim, challenge)
        return claim

    def _cpu_turn_is_live(self, token: CpuTurnToken) -> bool:
        return (
            token == self.cpu_turn_token()
            and self.turn is Actor.CPU
            and not self.is_finished
        )

    def _is_close_game(self) -> bool:
        if self.mode is not GameMode.QUICK_PLAY:
            return False
        threshold = self.config.tense_score_threshold
        return self.player_score <= threshold or self.cpu_score <= threshold

    def _schedule_cpu_turn(self) -> list[Effect]:
        if self.turn is Actor.CPU and not self.is_finished:
            return [ScheduleCpuTurn(self.cpu_turn_token())]
        return []

    # -- Transitions -----------------------------------------------------

    def _roll_for(self, actor: Actor) -> list[Effect]:
        dice = self._roller()
        actual = dice.code
        challenge = self.active_challenge
        legal_truth = ClaimEngine.is_truthful_claim_legal(challenge, actual)

        self._rolls[actor] = actual
        self._dice[actor] = dice
        if actor is Actor.PLAYER:
            self.must_bluff = not legal_truth
            self._set_message(narration.roll_message(actual, legal_truth))

        logger.debug("%s rolled %d against %s", actor.value, actual, challenge)
        return [
            RecordRoll(actual),
            self._notify(
                GameEvent.DICE_ROLLED,
                actor,
                roll=actual,
                dice=list(dice.values),
                must_bluff=not legal_truth,
            ),
        ]

    def _commit_claim(self, actor: Actor, value: int, actual: int) -> list[Effect]:
        previous = self.last_claim
        challenge = self.active_challenge
        self._push_claim(actor, value, actual)
        effects: list[Effect] = [
            RecordClaim(value),
            self._notify(
                GameEvent.CLAIM_MADE,
                actor,
                claim=value,
                previous=previous,
                challenge=challenge,
            ),
        ]

        if value == SOCIAL:
            return effects + self._show_social(actor)

        self.baseline_claim = ChallengeResolver.next_baseline(self.baseline_claim, previous, value)
        self.last_action = ChallengeResolver.next_last_action(challenge, value)
        self.last_claim = value
        self.last_claimant = actor
        self.must_bluff = False
        self.pending_inferno_delay = actor is Actor.PLAYER and value == INFERNO
        self._rolls[actor.other] = None
        self._dice[actor.other] = None
        if actor is Actor.CPU:
            self.pending_cpu_raise = PendingCpuRaise(claim=value, actual=actual)

        self._set_message(narration.claim_message(actor, previous, value))
        self.turn = actor.other
        return effects + self._schedule_cpu_turn()

    def _show_social(self, actor: Actor) -> list[Effect]:
        """A shown 41 clears the round; the other actor opens the next one."""
        shown = self._dice[actor]
        self._reset_round()
        if actor is Actor.CPU and shown is not None:
            self.cpu_social_dice = DiceRoll.of(shown.high, shown.low)
        self.turn = actor.other
        self.pending_inferno_delay = False
        self._set_message(narration.social_message(actor))

        effects: list[Effect] = [
            self._notify(GameEvent.SOCIAL_SHOWN, actor),
            self._notify(GameEvent.ROUND_RESOLVED, actor, reason="social"),
        ]
        return effects + self._schedule_cpu_turn()

    def _forfeit_inferno(self, actor: Actor) -> list[Effect]:
        logger.info("%s failed to answer Inferno", actor.value)
        effects: list[Effect] = [self._notify(GameEvent.INFERNO_FORFEITED, actor)]
        effects += self._settle_loss(actor, 2, narration.inferno_forfeit_message(actor))
        self._observe(self.opponent.observe_round_outcome, actor is Actor.CPU)
        effects += self._save_opponent_state()
        effects.append(self._notify(GameEvent.ROUND_RESOLVED, actor, reason="inferno_forfeit"))

        if not self.is_finished:
            self._reset_round()
            self.turn = actor.other
            self.pending_inferno_delay = False
            effects += self._schedule_cpu_turn()
        return effects

    def _resolve_call(self, caller: Actor) -> list[Effect]:
        """Settle a bluff call against the defender's actual roll."""
        defender = caller.other
        claim = self.last_claim
        actual = self._rolls[defender]

        if caller is Actor.CPU:
            self._observe(self.opponent.observe_showdown, claim, actual)

        outcome = ClaimEngine.resolve_bluff(
            claim, actual, self.last_action is LastAction.REVERSE_VS_MEXICAN
        )
        loser = defender if outcome.liar_is_defender else caller

        if caller is Actor.PLAYER:
            self.bluff_events += 1
            if outcome.liar_is_defender:
                self.correct_bluff_events += 1
        self.last_bluff_caller = caller
        self.last_bluff_defender_truth = outcome.defender_told_truth

        # Survival always shows a single point at stake.
        shown_penalty = 1 if self.mode is GameMode.SURVIVAL else outcome.penalty
        message = narration.format_call_bluff_message(
            caller, defender, outcome.defender_told_truth, shown_penalty
        )
        logger.debug(
            "%s called bluff on %s (actual=%s): %s loses %d",
            caller.value, claim, actual, loser.value, outcome.penalty,
        )

        effects: list[Effect] = [
            self._notify(
                GameEvent.BLUFF_CALLED,
                caller,
                claim=claim,
                actual=actual,
                defender_told_truth=outcome.defender_told_truth,
                penalty=outcome.penalty,
                loser=loser.value,
            )
        ]
        if caller is Actor.CPU and outcome.defender_told_truth:
            self._push_event(f"{narration.CPU_NAME} called your bluff incorrectly.")

        effects += self._settle_loss(loser, outcome.penalty, message)
        self._observe(self.opponent.observe_round_outcome, loser is Actor.CPU)
        effects += self._save_opponent_state()
        self.pending_cpu_raise = None
        effects.append(self._notify(GameEvent.ROUND_RESOLVED, loser, reason="bluff_called"))

        if not self.is_finished:
            self._reset_round()
            self.turn = caller
            if self.mode is GameMode.SURVIVAL and caller is Actor.PLAYER and loser is Actor.CPU:
                self.turn = Actor.CPU
            self.pending_inferno_delay = False
            effects += self._schedule_cpu_turn()
        return effects

    # -- Scoring ---------------------------------------------------------

    def _settle_loss(self, loser: Actor, amount: int, message: str) -> list[Effect]:
        outcome = self.ledger.apply_loss(loser, amount)
        effects: list[Effect] = [
            self._notify(
                event,
                loser,
                amount=amount,
                loser_score=outcome.loser_score,
                streak=outcome.streak,
            )
            for event in outcome.events
        ]
        if self.mode is GameMode.SURVIVAL:
            return effects + self._settle_survival(outcome, message)
        return effects + self._settle_quick_play(outcome, message)

    def _settle_quick_play(self, outcome: LossOutcome, message: str) -> list[Effect]:
        text = narration.game_over_message(outcome.loser) if outcome.finished else message
        self._push_event(text)
        self._push_score_change(
            outcome.loser,
            f"{text} You: {self.player_score} | {narration.CPU_NAME}: {self.cpu_score}",
        )
        self._set_message(text)
        if not outcome.finished:
            return []

        winner = outcome.winner
        self.game_over = winner
        logger.info("Game over: %s wins", winner.value)
        final_claim = str(self.last_claim) if self.last_claim is not None else None
        return [
            RecordOutcome(
                winner=winner.value,
                winning_claim=final_claim if winner is Actor.PLAYER else None,
                losing_claim=final_claim if winner is Actor.CPU else None,
            ),
            UpdateRank(
                mode=GameMode.QUICK_PLAY.value,
                won=winner is Actor.PLAYER,
                bluff_events=self.bluff_events,
                correct_bluff_events=self.correct_bluff_events,
            ),
        ]

    def _settle_survival(self, outcome: LossOutcome, message: str) -> list[Effect]:
        self._push_score_change(outcome.loser, message)
        self._set_message(message)
        if not outcome.streak_broken:
            self._push_event(f"You survived! Streak: {outcome.streak}")
            return []

        logger.info("Streak broken at %d (best %d)", outcome.streak, outcome.best_streak)
        self._push_event(f"Streak ended at {outcome.streak}")
        return [
            RecordRun(outcome.streak),
            SubmitGlobalBest(outcome.streak),
            UpdateRank(
                mode=GameMode.SURVIVAL.value,
                survival_streak=outcome.streak,
                bluff_events=self.bluff_events,
                correct_bluff_events=self.correct_bluff_events,
            ),
        ]

    # -- Opponent bookkeeping --------------------------------------------

    def _settle_pending_cpu_raise(self, called: bool) -> list[Effect]:
        pending = self.pending_cpu_raise
        if pending is None:
            return []
        self.pending_cpu_raise = None
        self._observe(self.opponent.observe_raise_resolved, pending.claim, pending.actual, called)
        return self._save_opponent_state()

    def _observe(self, hook: Callable[..., None], *args: Any) -> None:
        try:
            hook(*args)
        except Exception:
            logger.exception("Opponent hook %s failed", getattr(hook, "__name__", hook))

    def _save_opponent_state(self) -> list[Effect]:
        try:
            blob = dict(self.opponent.state())
        except Exception:
            logger.exception("Could not snapshot opponent state")
            return []
        return [SaveOpponentState(blob)]

    # -- Helpers ---------------------------------------------------------

    def _can_act(self, actor: Actor, action: str) -> bool:
        if self.is_finished:
            logger.debug("Ignoring %s by %s: session finished", action, actor.value)
            return False
        if self.turn is not actor:
            logger.debug("Ignoring %s by %s: not their turn", action, actor.value)
            return False
        if self.turn_lock:
            logger.debug("Ignoring %s by %s: turn locked", action, actor.value)
            return False
        return True

    def _begin_lock(self) -> None:
        self.turn_lock = True

    def _end_lock(self) -> None:
        self.turn_lock = False

    def _set_message(self, message: str) -> None:
        self._messages[self.mode] = message

    def _push_claim(self, actor: Actor, claim: int, actual: int | None) -> None:
        self._claims[self.mode].append(
            ClaimRecord(actor=actor, claim=claim, bluff=actual is None or claim != actual)
        )

    def _push_event(self, text: str) -> None:
        self._claims[self.mode].append(EventRecord(text=text))

    def _push_score_change(self, actor: Actor, text: str) -> None:
        self._score_history[self.mode].append(ScoreChange(text=text, actor=actor))

    def _notify(self, event: GameEvent, actor: Actor | None = None, **data: Any) -> Notify:
        return Notify(
            EventPayload(
                event=event,
                session_id=self.session_id,
                actor=actor.value if actor else None,
                data=data,
            )
        )
