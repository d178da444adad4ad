"""Inbound payload models and the boundary decoder."""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ProbeCallback:
    """A callback (or a raw probe message) carrying a correlation timestamp."""

    timestamp: int
    received: int | None = None
    latency_seconds: float | None = None
    probe_id: str | None = None

    def with_receipt(self, received: int) -> "ProbeCallback":
        """Stamp the receive time and derive latency from it."""
        return ProbeCallback(
            timestamp=self.timestamp,
            received=received,
            latency_seconds=(received - self.timestamp) / 1000.0,
            probe_id=self.probe_id,
        )

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "received": self.received,
            "latency_seconds": self.latency_seconds,
        }
        if self.probe_id is not None:
            payload["probe_id"] = self.probe_id
        return payload


@dataclass(frozen=True)
class LifecycleEvent:
    """A third-party channel message with no probe timestamp."""

    body: Any = field(default=None)


InboundMessage = Union[ProbeCallback, LifecycleEvent]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # json accepts 1e400 and Infinity
    try:
        return math.isfinite(value)
    except OverflowError:  # int beyond float range
        return False


def decode_inbound(raw: str | bytes | dict | Any) -> InboundMessage:
    """
    Decode an inbound channel or callback body exactly once.

    A body with a positive finite numeric ``timestamp`` is a ProbeCallback; anything
    else, including text that is not JSON, is a LifecycleEvent.
    """
    body = raw
    if isinstance(raw, (str, bytes)):
        try:
            body = json.loads(raw)
        except ValueError:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8", "replace")
            return LifecycleEvent(body=raw)

    if not isinstance(body, dict):
        return LifecycleEvent(body=body)

    timestamp = body.get("timestamp")
    if not _is_number(timestamp) or timestamp <= 0:
        return LifecycleEvent(body=body)

    received = body.get("received")
    latency = body.get("latency_seconds")
    probe_id = body.get("probe_id")

    return ProbeCallback(
        timestamp=int(timestamp),
        received=int(received) if _is_number(received) and received > 0 else None,
        latency_seconds=float(latency) if _is_number(latency) else None,
        probe_id=str(probe_id) if probe_id not in (None, "") else None,
    )
