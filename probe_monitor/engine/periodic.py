"""Base class for fixed-period background tasks."""

import asyncio

from ..logging_config import get_logger

logger = get_logger(__name__)


class PeriodicTask:
    """Runs ``tick()`` every ``interval`` seconds until the stop event is set."""

    name = "periodic"

    def __init__(
        self,
        interval_seconds: float,
        stop_event: asyncio.Event | None = None,
        shutdown_grace_seconds: float = 5.0,
    ):
        self._interval = interval_seconds
        self._stop_event = stop_event
        self._shutdown_grace = shutdown_grace_seconds
        self._task: asyncio.Task | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background loop."""
        if self.running:
            return
        if self._stop_event is None or self._stop_event.is_set():
            self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info("%s started, interval %gs", self.name, self._interval)

    async def stop(self) -> None:
        """Signal shutdown and wait for the loop to exit."""
        if self._stop_event is not None:
            self._stop_event.set()

        if self._task:
            # A tick in progress gets a grace period to finish its alerts
            done, _ = await asyncio.wait({self._task}, timeout=self._shutdown_grace)
            if not done:
                self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("%s stopped", self.name)

    async def tick(self) -> None:
        raise NotImplementedError

    async def _run(self) -> None:
        stop_event = self._stop_event
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("%s tick error: %s", self.name, e, exc_info=True)
