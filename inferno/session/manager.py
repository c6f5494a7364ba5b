"""
Inferno Dice - Game Session

Host-facing facade: one RoundStateMachine wired to an EffectRunner and the
configured gateways. UIs and scripts drive the game through this class and
never touch the runner directly.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable

from supabase import Client

from inferno.config.settings import Settings, get_settings
from inferno.database import OpponentStateManager, RankManager, StatsManager, get_supabase_client
from inferno.engine.base import Actor, DiceRoll
from inferno.engine.effects import Effect
from inferno.engine.opponent import OpponentDecisionPort
from inferno.engine.round_machine import RoundStateMachine
from inferno.session.effect_runner import EffectRunner, Listener
from inferno.session.gateways import (
    NullPersistence,
    PersistenceGateway,
    RankGateway,
    StatsGateway,
)

logger = logging.getLogger(__name__)


class GameSession:
    """A single table: the human player against the CPU."""

    def __init__(
        self,
        machine: RoundStateMachine | None = None,
        *,
        stats: StatsGateway | None = None,
        rank: RankGateway | None = None,
        persistence: PersistenceGateway | None = None,
    ) -> None:
        self.machine = machine or RoundStateMachine()
        self.persistence = persistence or NullPersistence()
        self.runner = EffectRunner(
            self.machine,
            stats=stats,
            rank=rank,
            persistence=self.persistence,
        )

    # -- Player actions --------------------------------------------------

    def roll(self) -> list[Effect]:
        return self._run(self.machine.roll(Actor.PLAYER))

    def claim(self, value: int) -> list[Effect]:
        return self._run(self.machine.claim(Actor.PLAYER, value))

    def call_bluff(self) -> list[Effect]:
        return self._run(self.machine.call_bluff(Actor.PLAYER))

    # -- Lifecycle -------------------------------------------------------

    def new_game(self) -> list[Effect]:
        self.runner.cancel_pending()
        return self._run(self.machine.new_game())

    def start_run(self) -> list[Effect]:
        self.runner.cancel_pending()
        return self._run(self.machine.start_run())

    def restart_run(self) -> list[Effect]:
        self.runner.cancel_pending()
        return self._run(self.machine.restart_run())

    def stop_run(self) -> list[Effect]:
        self.runner.cancel_pending()
        return self._run(self.machine.stop_run())

    def close(self) -> None:
        """Drop any CPU turn still waiting to run and release worker threads."""
        self.runner.shutdown()

    async def drain(self) -> None:
        await self.runner.drain()

    # -- Observation -----------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a lifecycle listener; returns an unsubscribe callable."""
        self.runner.add_listener(listener)
        return lambda: self.runner.remove_listener(listener)

    def snapshot(self) -> dict[str, Any]:
        state = self.machine.snapshot()
        state["message"] = self.machine.message
        state["claim_options"] = self.machine.build_claim_options()
        return state

    def load_opponent_state(self) -> bool:
        """Restore the CPU's learned state. Returns True when a blob was applied."""
        try:
            blob = self.persistence.load()
        except Exception:
            logger.exception("Could not load opponent state")
            return False
        if not blob:
            return False
        try:
            self.machine.opponent.load_state(blob)
        except Exception:
            logger.exception("Opponent rejected saved state")
            return False
        logger.info("Restored opponent state")
        return True

    def _run(self, effects: list[Effect]) -> list[Effect]:
        self.runner.run(effects)
        return effects


def create_session(
    settings: Settings | None = None,
    *,
    opponent: OpponentDecisionPort | None = None,
    roller: Callable[[], DiceRoll] | None = None,
    rng: random.Random | None = None,
    client: Client | None = None,
) -> GameSession:
    """Build a session from settings.

    Supabase gateways are used when credentials are configured (or a client
    is passed in), null gateways otherwise.
    """
    settings = settings or get_settings()
    machine = RoundStateMachine(
        opponent,
        config=settings.game_config(),
        roller=roller,
        rng=rng,
    )

    if client is None and settings.has_supabase:
        client = get_supabase_client()

    if client is None:
        logger.info("Supabase not configured; running with null gateways")
        session = GameSession(machine)
    else:
        session = GameSession(
            machine,
            stats=StatsManager(client),
            rank=RankManager(client, settings.player_id),
            persistence=OpponentStateManager(client, settings.player_id),
        )

    session.load_opponent_state()
    return session
