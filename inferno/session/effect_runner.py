"""
Inferno Dice - Effect Runner

Carries out the effects returned by RoundStateMachine transitions.

Inside a running asyncio loop, gateway calls are pushed to an executor and
CPU turns become tasks keyed by their token. Opponent-state saves and the
global-best fetch/submit share a single-worker executor so they land in
the order they were emitted. Without a loop (plain synchronous hosts,
tests) gateway calls run inline and a scheduled CPU turn is driven to
completion with asyncio.run before control returns.

Gateway and listener failures are logged and swallowed; the game goes on.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable

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
from inferno.engine.events import EventPayload
from inferno.engine.round_machine import RoundStateMachine
from inferno.session.gateways import (
    NullPersistence,
    NullRank,
    NullStats,
    PersistenceGateway,
    RankGateway,
    StatsGateway,
)

logger = logging.getLogger(__name__)

Listener = Callable[[EventPayload], None]


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class EffectRunner:
    """Dispatches effects to gateways, listeners and the CPU scheduler."""

    def __init__(
        self,
        machine: RoundStateMachine,
        *,
        stats: StatsGateway | None = None,
        rank: RankGateway | None = None,
        persistence: PersistenceGateway | None = None,
        listeners: Iterable[Listener] | None = None,
    ) -> None:
        self.machine = machine
        self.stats = stats or NullStats()
        self.rank = rank or NullRank()
        self.persistence = persistence or NullPersistence()
        self._listeners: list[Listener] = list(listeners or [])
        self._cpu_tasks: dict[CpuTurnToken, asyncio.Task] = {}
        self._pending: set[asyncio.Future] = set()
        self._ordered_executor: ThreadPoolExecutor | None = None

    # -- Listeners -------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- Dispatch --------------------------------------------------------

    def run(self, effects: Iterable[Effect]) -> None:
        """Carry out effects in order."""
        for effect in effects:
            self._dispatch(effect)

    def _dispatch(self, effect: Effect) -> None:
        if isinstance(effect, Notify):
            self._notify(effect.payload)
        elif isinstance(effect, ScheduleCpuTurn):
            self._schedule_cpu_turn(effect.token)
        elif isinstance(effect, RecordRoll):
            self._call(self.stats.record_roll, effect.code)
        elif isinstance(effect, RecordClaim):
            self._call(self.stats.record_claim, effect.code)
        elif isinstance(effect, RecordOutcome):
            self._call(
                self.stats.record_outcome,
                effect.winner,
                effect.winning_claim,
                effect.losing_claim,
            )
        elif isinstance(effect, RecordRun):
            self._call(self.stats.record_run, effect.streak)
        elif isinstance(effect, FetchGlobalBest):
            self._call(
                self.stats.fetch_global_best,
                on_result=self.machine.note_global_best,
                ordered=True,
            )
        elif isinstance(effect, SubmitGlobalBest):
            self._call(
                self.stats.submit_global_best,
                effect.streak,
                on_result=self.machine.note_global_best,
                ordered=True,
            )
        elif isinstance(effect, UpdateRank):
            self._call(
                self.rank.update_from_result,
                effect.mode,
                won=effect.won,
                survival_streak=effect.survival_streak,
                bluff_events=effect.bluff_events,
                correct_bluff_events=effect.correct_bluff_events,
            )
        elif isinstance(effect, SaveOpponentState):
            self._call(self.persistence.save_opponent_state, effect.blob, ordered=True)
        else:
            logger.warning("Unknown effect %r", effect)

    def _notify(self, payload: EventPayload) -> None:
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener failed handling %s", payload.event.name)

    # -- Gateway calls ---------------------------------------------------

    def _call(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_result: Callable[[Any], None] | None = None,
        ordered: bool = False,
        **kwargs: Any,
    ) -> None:
        loop = _running_loop()
        if loop is None:
            self._invoke(fn, args, kwargs, on_result)
            return
        executor = self._ordered() if ordered else None
        task = loop.create_task(
            self._invoke_async(loop, executor, fn, args, kwargs, on_result)
        )
        self._track(task)

    def _invoke(
        self,
        fn: Callable[..., Any],
        args: tuple,
        kwargs: dict[str, Any],
        on_result: Callable[[Any], None] | None,
    ) -> None:
        try:
            result = fn(*args, **kwargs)
            if on_result is not None:
                on_result(result)
        except Exception:
            logger.exception("Gateway call %s failed", _name(fn))

    async def _invoke_async(
        self,
        loop: asyncio.AbstractEventLoop,
        executor: ThreadPoolExecutor | None,
        fn: Callable[..., Any],
        args: tuple,
        kwargs: dict[str, Any],
        on_result: Callable[[Any], None] | None,
    ) -> None:
        try:
            result = await loop.run_in_executor(executor, functools.partial(fn, *args, **kwargs))
            if on_result is not None:
                on_result(result)
        except Exception:
            logger.exception("Gateway call %s failed", _name(fn))

    def _ordered(self) -> ThreadPoolExecutor:
        if self._ordered_executor is None:
            self._ordered_executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="inferno-ordered"
            )
        return self._ordered_executor

    def _track(self, future: asyncio.Future) -> None:
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    # -- CPU scheduling --------------------------------------------------

    def _schedule_cpu_turn(self, token: CpuTurnToken) -> None:
        loop = _running_loop()
        if loop is None:
            asyncio.run(self._run_to_idle(token))
            return

        existing = self._cpu_tasks.get(token)
        if existing is not None and not existing.done():
            logger.debug("CPU turn already scheduled for %s", token)
            return
        task = loop.create_task(self._cpu_turn(token))
        self._cpu_tasks[token] = task
        task.add_done_callback(functools.partial(self._forget_cpu_task, token))

    def _forget_cpu_task(self, token: CpuTurnToken, task: asyncio.Task) -> None:
        if self._cpu_tasks.get(token) is task:
            del self._cpu_tasks[token]

    async def _cpu_turn(self, token: CpuTurnToken) -> None:
        try:
            effects = await self.machine.cpu_turn(token)
        except asyncio.CancelledError:
            logger.debug("CPU turn cancelled for %s", token)
            raise
        except Exception:
            logger.exception("CPU turn failed for %s", token)
            return
        self.run(effects)

    async def _run_to_idle(self, token: CpuTurnToken) -> None:
        await self._cpu_turn(token)
        await self.drain()

    def cancel_pending(self) -> None:
        """Cancel every CPU turn still waiting to run."""
        for task in list(self._cpu_tasks.values()):
            task.cancel()
        self._cpu_tasks.clear()

    def shutdown(self) -> None:
        """Cancel pending CPU turns and release the ordered executor."""
        self.cancel_pending()
        if self._ordered_executor is not None:
            self._ordered_executor.shutdown(wait=False)
            self._ordered_executor = None

    async def drain(self) -> None:
        """Wait until no CPU turn or gateway call is outstanding."""
        while True:
            pending = [
                task for task in (*self._cpu_tasks.values(), *self._pending)
                if not task.done()
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)


def _name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)
