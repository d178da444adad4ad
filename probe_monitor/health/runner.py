"""Single-flight launcher for health probing runs."""

import asyncio
from typing import Callable

from ..logging_config import get_logger
from ..models import LifecycleEvent
from .prober import HealthProber

logger = get_logger(__name__)

ProberFactory = Callable[[], HealthProber]


class HealthCheckRunner:
    """Starts at most one HealthProber run at a time in the background."""

    def __init__(self, prober_factory: ProberFactory | None):
        self._prober_factory = prober_factory
        self._task: asyncio.Task | None = None

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, event: LifecycleEvent) -> bool:
        """Start a probing run for a lifecycle event. Returns True if one started."""
        logger.info(
            "Lifecycle message detected - checking target health",
            extra={"context": {"body": event.body}},
        )

        if self._prober_factory is None:
            logger.warning("ADDR is not set, skipping health check")
            return False

        if self.busy:
            logger.info("Health check already in progress, skipping")
            return False

        self._task = asyncio.create_task(self._prober_factory().run())
        return True

    async def stop(self) -> None:
        """Cancel a running probe."""
        if self.busy:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
