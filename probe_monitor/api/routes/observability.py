"""Observability API routes."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from ...app import MonitorApplication


class StatusResponse(BaseModel):
    """Response model for monitor status."""

    pending: int
    dispatched: int
    dispatch_errors: int
    healthy: int
    late: int
    expired: int
    misses: int
    latency_threshold_seconds: float
    expiry_timeout_seconds: float
    health_check_running: bool


class PendingProbeResponse(BaseModel):
    """Response model for a pending probe."""

    probe_id: str
    timestamp: int
    dispatched_at: datetime
    age_seconds: float


def create_observability_router(app: MonitorApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> dict:
        """Counters and thresholds of the running engine."""
        engine = app.engine
        stats = engine.stats()
        return {
            "pending": stats.pending,
            "dispatched": stats.dispatched,
            "dispatch_errors": stats.dispatch_errors,
            "healthy": stats.healthy,
            "late": stats.late,
            "expired": stats.expired,
            "misses": stats.misses,
            "latency_threshold_seconds": engine.latency_threshold_seconds,
            "expiry_timeout_seconds": engine.expiry_timeout_seconds,
            "health_check_running": app.health_checks.busy,
        }

    @router.get("/pending", response_model=list[PendingProbeResponse])
    async def get_pending() -> list[dict]:
        """Probes still awaiting a callback, oldest first."""
        now = datetime.now(timezone.utc)
        probes = await app.engine.pending_snapshot()
        result = []
        for probe in probes:
            dispatched_at = datetime.fromtimestamp(probe.dispatched_at, tz=timezone.utc)
            result.append(
                {
                    "probe_id": probe.probe_id,
                    "timestamp": probe.published_timestamp,
                    "dispatched_at": dispatched_at,
                    "age_seconds": max((now - dispatched_at).total_seconds(), 0.0),
                }
            )
        return result

    return router
