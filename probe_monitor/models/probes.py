"""Probe-related data models."""

from dataclasses import dataclass
from enum import Enum


class Outcome(str, Enum):
    """How a callback was classified by the correlator."""

    HEALTHY = "healthy"
    LATE = "late"
    MISS = "miss"


@dataclass(frozen=True)
class Probe:
    """A dispatched probe awaiting its callback."""

    probe_id: str  # correlation key echoed by the responder
    published_timestamp: int  # epoch millis embedded in the payload
    dispatched_at: float  # wall-clock seconds at send

    def to_payload(self) -> dict:
        """Outbound channel payload."""
        return {"timestamp": self.published_timestamp, "probe_id": self.probe_id}


@dataclass(frozen=True)
class Resolution:
    """Result of matching one callback against the pending set."""

    outcome: Outcome
    probe: Probe | None = None
    latency_seconds: float | None = None

    @property
    def matched(self) -> bool:
        return self.probe is not None


@dataclass(frozen=True)
class ProbeStats:
    """Counters describing what the engine has seen since start."""

    dispatched: int = 0
    dispatch_errors: int = 0
    healthy: int = 0
    late: int = 0
    expired: int = 0
    misses: int = 0
    pending: int = 0
