"""
Inferno Dice - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. Value objects are immutable (frozen dataclasses) so they can
be shared freely between the state machine, the opponent and the host.
"""

from dataclasses import dataclass
from enum import Enum, auto


class Actor(Enum):
    """The two seats at the table."""
    PLAYER = "player"
    CPU = "cpu"

    @property
    def other(self) -> "Actor":
        """The opposing actor."""
        return Actor.CPU if self is Actor.PLAYER else Actor.PLAYER


class GameMode(Enum):
    """Available game modes."""
    QUICK_PLAY = "quick_play"
    SURVIVAL = "survival"


class ClaimCategory(Enum):
    """Ranking categories of a claim code."""
    MIXED = auto()
    DOUBLE = auto()
    SPECIAL = auto()


class LastAction(Enum):
    """How the standing claim was reached."""
    NORMAL = auto()
    REVERSE_VS_MEXICAN = auto()   # 31 played against an active 21


class Phase(Enum):
    """
    Resting phases of a round.

    A resolved round (bluff call, Social, Inferno forfeit) is announced with
    GameEvent.ROUND_RESOLVED; the next round is already open by then.
    """
    AWAITING_ROLL = auto()
    AWAITING_CLAIM = auto()
    AWAITING_RESPONSE = auto()
    GAME_OVER = auto()
    STREAK_BROKEN = auto()


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of a two-dice roll.

    Attributes:
        values: The two die faces in the order they landed
    """
    values: tuple[int, int]

    def __post_init__(self) -> None:
        """Validate dice values are within valid range."""
        if len(self.values) != 2:
            raise ValueError(f"A roll needs exactly 2 dice, got {len(self.values)}.")
        for value in self.values:
            if not (1 <= value <= 6):
                raise ValueError(
                    f"Invalid die value {value}. Must be between 1 and 6."
                )

    @property
    def high(self) -> int:
        return max(self.values)

    @property
    def low(self) -> int:
        return min(self.values)

    @property
    def code(self) -> int:
        """Two-digit claim code, larger face first (3 and 5 -> 53)."""
        return self.high * 10 + self.low

    @classmethod
    def of(cls, d1: int, d2: int) -> "DiceRoll":
        """Create a DiceRoll from two faces."""
        return cls(values=(d1, d2))


@dataclass(frozen=True)
class RoundOutcome:
    """
    Result of calling a bluff.

    Attributes:
        liar_is_defender: True when the claimant was lying (caller wins)
        penalty: Points the loser gives up (1, or 2 under Inferno stakes)
    """
    liar_is_defender: bool
    penalty: int

    @property
    def defender_told_truth(self) -> bool:
        return not self.liar_is_defender


@dataclass(frozen=True)
class ClaimRecord:
    """A claim as it appears in the history buffer."""
    actor: Actor
    claim: int
    bluff: bool


@dataclass(frozen=True)
class EventRecord:
    """A narrative line in the history buffer."""
    text: str


ClaimHistoryEntry = ClaimRecord | EventRecord


@dataclass(frozen=True)
class ScoreChange:
    """A score-change line shown in the narration box."""
    text: str
    actor: Actor


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a game session.

    Attributes:
        starting_score: Points each side starts a quick-play game with
        history_size: Length of the per-mode claim history ring buffer
        score_history_size: Length of the per-mode score-change history
        think_delay: Seconds the CPU "thinks" before acting
        tense_delay: Seconds the CPU thinks when the game is on a knife edge
        tense_score_threshold: Score at or below which a game counts as tense
    """
    starting_score: int = 5
    history_size: int = 10
    score_history_size: int = 3
    think_delay: float = 1.0
    tense_delay: float = 3.0
    tense_score_threshold: int = 2

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.starting_score < 1:
            raise ValueError(
                f"Starting score must be at least 1, got {self.starting_score}."
            )
        if self.history_size < 1 or self.score_history_size < 1:
            raise ValueError("History sizes must be at least 1.")
        if self.think_delay < 0 or self.tense_delay < 0:
            raise ValueError("CPU delays cannot be negative.")
        if self.tense_score_threshold < 0:
            raise ValueError("Tense score threshold cannot be negative.")
