"""
Inferno Dice - Gateways

The three collaborators the game talks to, as structural protocols, plus
null implementations so the core runs headless (tests, offline play).
The Supabase-backed implementations live in inferno.database.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PersistenceGateway(Protocol):
    """Stores the CPU opponent's learned state between sessions."""

    def save_opponent_state(self, blob: dict[str, Any]) -> None: ...

    def load(self) -> dict[str, Any] | None: ...


@runtime_checkable
class StatsGateway(Protocol):
    """Gameplay telemetry and the global survival best."""

    def record_roll(self, code: int) -> Any: ...

    def record_claim(self, code: int) -> Any: ...

    def record_outcome(
        self,
        winner: str,
        winning_claim: str | None = None,
        losing_claim: str | None = None,
    ) -> Any: ...

    def record_run(self, streak: int) -> Any: ...

    def fetch_global_best(self) -> int: ...

    def submit_global_best(self, streak: int) -> int: ...


@runtime_checkable
class RankGateway(Protocol):
    """Feeds finished games into the player's rank."""

    def update_from_result(
        self,
        mode: str,
        won: bool | None = None,
        survival_streak: int = 0,
        bluff_events: int = 0,
        correct_bluff_events: int = 0,
    ) -> None: ...


class NullPersistence:
    def save_opponent_state(self, blob: dict[str, Any]) -> None:
        return None

    def load(self) -> dict[str, Any] | None:
        return None


class NullStats:
    def record_roll(self, code: int) -> None:
        return None

    def record_claim(self, code: int) -> None:
        return None

    def record_outcome(
        self,
        winner: str,
        winning_claim: str | None = None,
        losing_claim: str | None = None,
    ) -> None:
        return None

    def record_run(self, streak: int) -> None:
        return None

    def fetch_global_best(self) -> int:
        return 0

    def submit_global_best(self, streak: int) -> int:
        return streak


class NullRank:
    def update_from_result(
        self,
        mode: str,
        won: bool | None = None,
        survival_streak: int = 0,
        bluff_events: int = 0,
        correct_bluff_events: int = 0,
    ) -> None:
        return None
