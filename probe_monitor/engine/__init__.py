"""Probe correlation engine and its background loops."""

from .correlator import ProbeEngine, format_timestamp
from .dispatch_loop import DispatchLoop
from .periodic import PeriodicTask
from .sweeper import ExpirySweeper

__all__ = [
    "ProbeEngine",
    "ExpirySweeper",
    "DispatchLoop",
    "PeriodicTask",
    "format_timestamp",
]
