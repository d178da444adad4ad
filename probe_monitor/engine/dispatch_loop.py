"""Dispatch loop driving the correlator."""

import asyncio

from ..errors import DispatchError
from ..logging_config import get_logger
from .correlator import ProbeEngine
from .periodic import PeriodicTask

logger = get_logger(__name__)


class DispatchLoop(PeriodicTask):
    """Dispatches one probe per interval for the lifetime of the process."""

    name = "dispatch_loop"

    def __init__(
        self,
        engine: ProbeEngine,
        interval_seconds: float = 30.0,
        stop_event: asyncio.Event | None = None,
    ):
        super().__init__(interval_seconds, stop_event)
        self._engine = engine

    async def tick(self) -> None:
        try:
            await self._engine.dispatch_probe()
        except DispatchError as e:
            # Already alerted by the engine; keep going.
            logger.warning("Dispatch failed, continuing: %s", e)
