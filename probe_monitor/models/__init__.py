"""Core data models for the probe monitor."""

from .alerts import AlertEvent, AlertKind
from .payloads import InboundMessage, LifecycleEvent, ProbeCallback, decode_inbound
from .probes import Outcome, Probe, ProbeStats, Resolution

__all__ = [
    # Probes
    "Probe",
    "ProbeStats",
    "Outcome",
    "Resolution",
    # Payloads
    "ProbeCallback",
    "LifecycleEvent",
    "InboundMessage",
    "decode_inbound",
    # Alerts
    "AlertEvent",
    "AlertKind",
]
