"""Tests for expiry sweeping."""

import asyncio

import pytest

from probe_monitor.engine import ExpirySweeper
from probe_monitor.models import Outcome, ProbeCallback


class TestSweepExpired:
    """Tests for ProbeEngine.sweep_expired()."""

    @pytest.mark.asyncio
    async def test_scenario_b_no_callback(self, engine, alert_sink, clock):
        """Test dispatch at t=0, sweep at t=25, timeout 20: one expiry alert."""
        probe = await engine.dispatch_probe()
        clock.advance(25)

        expired = await engine.sweep_expired()

        assert expired == [probe]
        assert engine.pending_count == 0
        assert alert_sink.subjects() == ["No callback received"]
        body = alert_sink.alerts[0][1]
        assert "1000" in body
        assert "within 20 seconds" in body

    @pytest.mark.asyncio
    async def test_young_probes_survive(self, engine, alert_sink, clock):
        """Test that probes inside the timeout window are left alone."""
        await engine.dispatch_probe()
        clock.advance(19)

        expired = await engine.sweep_expired()

        assert expired == []
        assert engine.pending_count == 1
        assert alert_sink.alerts == []

    @pytest.mark.asyncio
    async def test_only_old_probes_are_evicted(self, engine, clock):
        """Test that a sweep evicts old probes and keeps new ones."""
        old = await engine.dispatch_probe()
        clock.advance(15)
        young = await engine.dispatch_probe()
        clock.advance(10)

        expired = await engine.sweep_expired()

        assert expired == [old]
        assert await engine.pending_snapshot() == [young]

    @pytest.mark.asyncio
    async def test_repeated_sweeps_alert_once(self, engine, alert_sink, clock):
        """Test that an expired probe is alerted exactly once."""
        await engine.dispatch_probe()
        clock.advance(25)

        await engine.sweep_expired()
        clock.advance(5)
        await engine.sweep_expired()

        assert len(alert_sink.alerts) == 1
        assert engine.stats().expired == 1

    @pytest.mark.asyncio
    async def test_late_callback_after_sweep_is_miss(self, engine, alert_sink, clock):
        """Test that a callback for a swept probe produces no further alert."""
        probe = await engine.dispatch_probe()
        clock.advance(25)
        await engine.sweep_expired()

        resolution = await engine.resolve_callback(
            ProbeCallback(
                timestamp=probe.published_timestamp,
                received=probe.published_timestamp + 26000,
                probe_id=probe.probe_id,
            )
        )

        assert resolution.outcome == Outcome.MISS
        assert alert_sink.subjects() == ["No callback received"]

    @pytest.mark.asyncio
    async def test_resolved_probe_is_never_swept(self, engine, alert_sink, clock):
        """Test that a callback before the sweep prevents an expiry alert."""
        probe = await engine.dispatch_probe()
        clock.advance(3)
        await engine.resolve_callback(
            ProbeCallback(
                timestamp=probe.published_timestamp,
                received=probe.published_timestamp + 3000,
                probe_id=probe.probe_id,
            )
        )
        clock.advance(30)

        assert await engine.sweep_expired() == []
        assert alert_sink.alerts == []


class TestExpirySweeper:
    """Tests for the periodic ExpirySweeper task."""

    @pytest.mark.asyncio
    async def test_sweeper_evicts_in_background(self, engine, alert_sink, clock):
        """Test that the running sweeper evicts expired probes."""
        await engine.dispatch_probe()
        clock.advance(30)

        sweeper = ExpirySweeper(engine, interval_seconds=0.01)
        await sweeper.start()
        await asyncio.sleep(0.1)
        await sweeper.stop()

        assert engine.pending_count == 0
        assert len(alert_sink.alerts) == 1

    @pytest.mark.asyncio
    async def test_sweeper_stops_promptly(self, engine):
        """Test that stop() does not wait for the next tick."""
        sweeper = ExpirySweeper(engine, interval_seconds=3600)
        await sweeper.start()
        assert sweeper.running

        await asyncio.wait_for(sweeper.stop(), timeout=1.0)

        assert not sweeper.running

    @pytest.mark.asyncio
    async def test_shared_stop_event_ends_loop(self, engine):
        """Test that setting the shared stop event ends the loop by itself."""
        stop_event = asyncio.Event()
        sweeper = ExpirySweeper(engine, interval_seconds=3600, stop_event=stop_event)
        await sweeper.start()

        stop_event.set()
        await asyncio.sleep(0.01)

        assert not sweeper.running
        await sweeper.stop()

    @pytest.mark.asyncio
    async def test_sweeper_survives_tick_errors(self, engine, monkeypatch):
        """Test that an exception in one sweep does not kill the loop."""
        calls = []

        async def flaky_sweep():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return []

        monkeypatch.setattr(engine, "sweep_expired", flaky_sweep)
        sweeper = ExpirySweeper(engine, interval_seconds=0.01)
        await sweeper.start()
        await asyncio.sleep(0.1)
        await sweeper.stop()

        assert len(calls) >= 2
