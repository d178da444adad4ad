"""Alert data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class AlertKind(str, Enum):
    """Which outcome produced an alert."""

    LATENCY = "latency"
    EXPIRY = "expiry"
    DISPATCH_ERROR = "dispatch_error"
    UNRESPONSIVE = "unresponsive"
    CALLBACK_DELIVERY = "callback_delivery"


@dataclass(frozen=True)
class AlertEvent:
    """A single fire-and-forget notification."""

    kind: AlertKind
    subject: str
    body: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
