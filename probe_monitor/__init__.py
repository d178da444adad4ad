"""Round-trip latency monitor for pub/sub channels."""

from .app import IApplication, MonitorApplication, ResponderApplication
from .alerting import FanOutAlertSink, IAlertSink, build_alert_sink
from .config import Settings
from .engine import DispatchLoop, ExpirySweeper, ProbeEngine
from .errors import (
    AlertDeliveryError,
    ConfigurationError,
    DispatchError,
    MonitorError,
    TransportError,
)
from .event_bus import BusMessage, EventBus, IEventBus, Topic
from .health import HealthCheckRunner, HealthProber, ProberState
from .models import (
    AlertEvent,
    AlertKind,
    LifecycleEvent,
    Outcome,
    Probe,
    ProbeCallback,
    ProbeStats,
    Resolution,
    decode_inbound,
)
from .responder import EchoResponder

__all__ = [
    # Application
    "IApplication",
    "MonitorApplication",
    "ResponderApplication",
    "Settings",
    # Models
    "Probe",
    "ProbeStats",
    "Outcome",
    "Resolution",
    "ProbeCallback",
    "LifecycleEvent",
    "decode_inbound",
    "AlertEvent",
    "AlertKind",
    "BusMessage",
    "Topic",
    # Errors
    "MonitorError",
    "ConfigurationError",
    "TransportError",
    "DispatchError",
    "AlertDeliveryError",
    # Components
    "ProbeEngine",
    "ExpirySweeper",
    "DispatchLoop",
    "HealthProber",
    "HealthCheckRunner",
    "ProberState",
    "EchoResponder",
    "IEventBus",
    "EventBus",
    "IAlertSink",
    "FanOutAlertSink",
    "build_alert_sink",
]
