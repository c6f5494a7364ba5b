"""Tests for inferno/session/effect_runner.py: EffectRunner dispatch and scheduling."""

import asyncio
import logging
import time

import pytest

from inferno.engine.base import Actor, GameConfig
from inferno.engine.effects import (
    FetchGlobalBest,
    Notify,
    RecordClaim,
    RecordOutcome,
    RecordRoll,
    RecordRun,
    SaveOpponentState,
    SubmitGlobalBest,
    UpdateRank,
)
from inferno.engine.events import EventPayload, GameEvent
from inferno.engine.round_machine import RoundStateMachine
from inferno.session.effect_runner import EffectRunner
from inferno.session.gateways import NullPersistence, NullRank, NullStats


@pytest.fixture
def runner(machine, stats, rank, persistence):
    return EffectRunner(machine, stats=stats, rank=rank, persistence=persistence)


def payload(event=GameEvent.DICE_ROLLED):
    return EventPayload(event=event, session_id="test-session")


class TestGatewayDispatch:
    def test_defaults_to_null_gateways(self, machine):
        runner = EffectRunner(machine)
        assert isinstance(runner.stats, NullStats)
        assert isinstance(runner.rank, NullRank)
        assert isinstance(runner.persistence, NullPersistence)

    def test_telemetry(self, runner, stats):
        runner.run([
            RecordRoll(53),
            RecordClaim(61),
            RecordOutcome(winner="player", winning_claim="61"),
            RecordRun(7),
        ])
        stats.record_roll.assert_called_once_with(53)
        stats.record_claim.assert_called_once_with(61)
        stats.record_outcome.assert_called_once_with("player", "61", None)
        stats.record_run.assert_called_once_with(7)

    def test_rank_update(self, runner, rank):
        runner.run([UpdateRank(mode="survival", survival_streak=4, bluff_events=2)])
        rank.update_from_result.assert_called_once_with(
            "survival",
            won=None,
            survival_streak=4,
            bluff_events=2,
            correct_bluff_events=0,
        )

    def test_save_opponent_state(self, runner, persistence):
        runner.run([SaveOpponentState({"showdowns": 3})])
        persistence.save_opponent_state.assert_called_once_with({"showdowns": 3})

    def test_fetch_global_best_feeds_machine(self, runner, machine):
        runner.run([FetchGlobalBest()])
        assert machine.global_best == 12

    def test_submit_global_best_feeds_machine(self, runner, machine, stats):
        runner.run([SubmitGlobalBest(15)])
        stats.submit_global_best.assert_called_once_with(15)
        assert machine.global_best == 15

    def test_gateway_failure_is_logged(self, runner, stats, caplog):
        stats.record_roll.side_effect = RuntimeError("network down")
        with caplog.at_level(logging.ERROR):
            runner.run([RecordRoll(53), RecordClaim(53)])
        assert "Gateway call" in caplog.text
        stats.record_claim.assert_called_once_with(53)

    def test_bad_global_best_is_logged(self, runner, machine, stats, caplog):
        stats.fetch_global_best.return_value = -3
        with caplog.at_level(logging.ERROR):
            runner.run([FetchGlobalBest()])
        assert machine.global_best == 0
        assert "Gateway call" in caplog.text


class TestListeners:
    def test_notify(self, runner):
        received = []
        runner.add_listener(received.append)
        runner.run([Notify(payload())])
        assert [p.event for p in received] == [GameEvent.DICE_ROLLED]

    def test_failing_listener_does_not_block_others(self, runner, caplog):
        received = []

        def broken(_):
            raise ValueError("render failed")

        runner.add_listener(broken)
        runner.add_listener(received.append)
        with caplog.at_level(logging.ERROR):
            runner.run([Notify(payload())])
        assert len(received) == 1
        assert "Listener failed" in caplog.text

    def test_remove_listener(self, runner):
        received = []
        runner.add_listener(received.append)
        runner.remove_listener(received.append)
        runner.remove_listener(received.append)
        runner.run([Notify(payload())])
        assert received == []


class TestCpuScheduling:
    def test_sync_host_runs_cpu_turn(self, machine, runner, roller, stats):
        roller.push((5, 4), (6, 1))
        runner.run(machine.roll())
        runner.run(machine.claim(Actor.PLAYER, 54))

        assert machine.last_claim == 61
        assert machine.last_claimant is Actor.CPU
        assert machine.turn is Actor.PLAYER
        stats.record_roll.assert_any_call(61)
        stats.record_claim.assert_any_call(61)

    def test_sync_host_chains_cpu_turns(self, machine, runner, roller, opponent):
        from inferno.engine.opponent import CallBluff

        roller.push((3, 2), (5, 4), (6, 3))
        runner.run(machine.roll())
        opponent.push(CallBluff())
        runner.run(machine.claim(Actor.PLAYER, 66))

        # CPU caught the bluff, kept the turn and opened the next round.
        assert machine.player_score == 4
        assert machine.last_claim == 63
        assert machine.turn is Actor.PLAYER

    def test_async_host_creates_task(self, machine, runner, roller):
        roller.push((5, 4), (6, 1))
        runner.run(machine.roll())

        async def scenario():
            runner.run(machine.claim(Actor.PLAYER, 54))
            assert machine.last_claim == 54
            await runner.drain()

        asyncio.run(scenario())
        assert machine.last_claim == 61

    def test_async_gateway_calls_run_in_executor(self, runner, stats):
        async def scenario():
            runner.run([RecordRoll(53)])
            await runner.drain()

        asyncio.run(scenario())
        stats.record_roll.assert_called_once_with(53)

    def test_async_saves_land_in_emission_order(self, machine, persistence):
        """A slow earlier save must not overwrite a newer opponent state."""
        written = []

        def save(blob):
            if blob["v"] == 1:
                time.sleep(0.05)
            written.append(blob)

        persistence.save_opponent_state.side_effect = save
        runner = EffectRunner(machine, persistence=persistence)

        async def scenario():
            runner.run([SaveOpponentState({"v": 1}), SaveOpponentState({"v": 2})])
            await runner.drain()

        asyncio.run(scenario())
        runner.shutdown()
        assert written == [{"v": 1}, {"v": 2}]

    def test_async_global_best_fetch_then_submit(self, machine, stats):
        def slow_fetch():
            time.sleep(0.05)
            return 5

        stats.fetch_global_best.side_effect = slow_fetch
        stats.submit_global_best.side_effect = lambda streak: streak
        runner = EffectRunner(machine, stats=stats)

        async def scenario():
            runner.run([FetchGlobalBest(), SubmitGlobalBest(20)])
            await runner.drain()

        asyncio.run(scenario())
        runner.shutdown()
        assert machine.global_best == 20

    def test_shutdown_allows_later_calls(self, machine, persistence):
        runner = EffectRunner(machine, persistence=persistence)

        async def scenario():
            runner.run([SaveOpponentState({"v": 1})])
            await runner.drain()

        asyncio.run(scenario())
        runner.shutdown()
        asyncio.run(scenario())
        runner.shutdown()
        assert persistence.save_opponent_state.call_count == 2

    def test_cancel_pending(self, opponent, roller, stats):
        machine = RoundStateMachine(
            opponent,
            config=GameConfig(think_delay=0.05, tense_delay=0.05),
            roller=roller,
        )
        runner = EffectRunner(machine, stats=stats)
        roller.push((5, 4), (6, 1))
        runner.run(machine.roll())

        async def scenario():
            runner.run(machine.claim(Actor.PLAYER, 54))
            await asyncio.sleep(0.01)
            runner.cancel_pending()
            await runner.drain()

        asyncio.run(scenario())
        assert machine.last_claim == 54
        assert machine.turn is Actor.CPU
        assert machine.turn_lock is False
        assert len(roller.queue) == 1
