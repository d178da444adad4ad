"""Expiry sweeper."""

import asyncio

from .correlator import ProbeEngine
from .periodic import PeriodicTask


class ExpirySweeper(PeriodicTask):
    """Evicts and alerts on probes that outlived the expiry timeout."""

    name = "expiry_sweeper"

    def __init__(
        self,
        engine: ProbeEngine,
        interval_seconds: float = 5.0,
        stop_event: asyncio.Event | None = None,
    ):
        super().__init__(interval_seconds, stop_event)
        self._engine = engine

    async def tick(self) -> None:
        await self._engine.sweep_expired()
