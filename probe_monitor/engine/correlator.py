"""Pending-probe correlation and expiry engine."""

import asyncio
import itertools
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Callable

from ..alerting import IAlertSink, fire_alert
from ..errors import DispatchError
from ..logging_config import get_logger
from ..models import (
    AlertEvent,
    AlertKind,
    Outcome,
    Probe,
    ProbeCallback,
    ProbeStats,
    Resolution,
)
from ..transport import IProbePublisher

logger = get_logger(__name__)

Clock = Callable[[], float]


def format_timestamp(timestamp_ms: int) -> str:
    """Render an epoch-millis timestamp for humans."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
    return f"{timestamp_ms} ({moment.isoformat()})"


class ProbeEngine:
    """
    Owns the pending set of in-flight probes.

    Every lookup-then-mutate sequence (dispatch insert, callback resolve,
    sweep evict) runs inside one ``async with self._lock`` block, so a probe
    is removed by exactly one path. Alerts and network calls happen after the
    lock is released.
    """

    def __init__(
        self,
        publisher: IProbePublisher,
        alert_sink: IAlertSink,
        latency_threshold_seconds: float = 10.0,
        expiry_timeout_seconds: float = 20.0,
        clock: Clock = time.time,
    ):
        self._publisher = publisher
        self._alerts = alert_sink
        self._threshold = latency_threshold_seconds
        self._timeout = expiry_timeout_seconds
        self._clock = clock

        self._pending: dict[str, Probe] = {}
        self._by_timestamp: dict[int, str] = {}  # fallback index, last write wins
        self._lock = asyncio.Lock()
        self._sequence = itertools.count(1)
        self._counters: Counter = Counter()

    @property
    def latency_threshold_seconds(self) -> float:
        return self._threshold

    @property
    def expiry_timeout_seconds(self) -> float:
        return self._timeout

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def pending_snapshot(self) -> list[Probe]:
        """Pending probes, oldest first."""
        async with self._lock:
            probes = list(self._pending.values())
        return sorted(probes, key=lambda p: p.dispatched_at)

    def stats(self) -> ProbeStats:
        return ProbeStats(
            dispatched=self._counters["dispatched"],
            dispatch_errors=self._counters["dispatch_errors"],
            healthy=self._counters["healthy"],
            late=self._counters["late"],
            expired=self._counters["expired"],
            misses=self._counters["misses"],
            pending=len(self._pending),
        )

    async def dispatch_probe(self) -> Probe:
        """
        Publish a new probe and leave it pending.

        The probe enters the pending set only once the publish has returned,
        so a sweep running during a slow publish cannot expire it. A failed
        publish fires a dispatch alert and raises DispatchError.
        """
        now = self._clock()
        timestamp = int(now * 1000)
        probe = Probe(
            probe_id=f"{timestamp}-{next(self._sequence)}",
            published_timestamp=timestamp,
            dispatched_at=now,
        )

        try:
            await self._publisher.publish(probe.to_payload())
        except Exception as e:
            self._counters["dispatch_errors"] += 1
            logger.error("Failed to publish probe %s: %s", probe.probe_id, e)
            subject = "Error publishing timestamp"
            await fire_alert(
                self._alerts,
                AlertEvent(AlertKind.DISPATCH_ERROR, subject, f"{subject}: {e}"),
            )
            raise DispatchError(probe.probe_id, e) from e

        async with self._lock:
            self._insert(probe)
            self._counters["dispatched"] += 1
        logger.info(
            "Published timestamp: %s",
            format_timestamp(timestamp),
            extra={"context": {"probe_id": probe.probe_id}},
        )
        return probe

    async def resolve_callback(self, callback: ProbeCallback) -> Resolution:
        """Match a callback to its pending probe and classify the latency."""
        async with self._lock:
            probe = self._take(callback)
            if probe is None:
                self._counters["misses"] += 1

        if probe is None:
            logger.info(
                "Callback for unknown or already resolved probe %s, timestamp %s",
                callback.probe_id,
                callback.timestamp,
            )
            return Resolution(Outcome.MISS)

        latency = self._latency_of(callback, probe)
        logger.info(
            "Received callback: published=%s, latency=%.2fs",
            format_timestamp(probe.published_timestamp),
            latency,
            extra={"context": {"probe_id": probe.probe_id}},
        )

        if latency > self._threshold:
            self._counters["late"] += 1
            logger.warning(
                "Latency %.2fs exceeds threshold %gs", latency, self._threshold
            )
            subject = "High latency detected"
            await fire_alert(
                self._alerts,
                AlertEvent(
                    AlertKind.LATENCY,
                    subject,
                    f"{subject}: {latency:.2f} sec for timestamp "
                    f"{format_timestamp(probe.published_timestamp)}",
                ),
            )
            return Resolution(Outcome.LATE, probe, latency)

        self._counters["healthy"] += 1
        logger.info("Latency within acceptable range")
        return Resolution(Outcome.HEALTHY, probe, latency)

    async def sweep_expired(self) -> list[Probe]:
        """Evict every probe dispatched before now - timeout, one alert each."""
        cutoff = self._clock() - self._timeout

        async with self._lock:
            expired = [p for p in self._pending.values() if p.dispatched_at < cutoff]
            for probe in expired:
                self._remove(probe)
            self._counters["expired"] += len(expired)

        subject = "No callback received"
        for probe in expired:
            logger.warning(
                "No callback received for timestamp %s within %g seconds",
                format_timestamp(probe.published_timestamp),
                self._timeout,
            )
            await fire_alert(
                self._alerts,
                AlertEvent(
                    AlertKind.EXPIRY,
                    subject,
                    f"{subject} within {self._timeout:g} seconds for timestamp "
                    f"{format_timestamp(probe.published_timestamp)}",
                ),
            )
        return expired

    # The helpers below must be called with self._lock held.

    def _insert(self, probe: Probe) -> None:
        self._pending[probe.probe_id] = probe
        self._by_timestamp[probe.published_timestamp] = probe.probe_id

    def _remove(self, probe: Probe) -> None:
        self._pending.pop(probe.probe_id, None)
        if self._by_timestamp.get(probe.published_timestamp) == probe.probe_id:
            del self._by_timestamp[probe.published_timestamp]

    def _take(self, callback: ProbeCallback) -> Probe | None:
        if callback.probe_id is not None:
            probe = self._pending.get(callback.probe_id)
        else:
            probe_id = self._by_timestamp.get(callback.timestamp)
            probe = self._pending.get(probe_id) if probe_id else None

        if probe is not None:
            self._remove(probe)
        return probe

    def _latency_of(self, callback: ProbeCallback, probe: Probe) -> float:
        # Measured against our own publish time, not the echoed timestamp
        published = probe.published_timestamp
        if callback.received is not None:
            return (callback.received - published) / 1000.0
        if callback.latency_seconds is not None:
            return callback.latency_seconds
        # A bare probe message consumed directly off the channel
        return (int(self._clock() * 1000) - published) / 1000.0
