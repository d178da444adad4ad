"""Health prober."""

from .prober import HealthProber, ProberState
from .runner import HealthCheckRunner, ProberFactory

__all__ = ["HealthProber", "ProberState", "HealthCheckRunner", "ProberFactory"]
