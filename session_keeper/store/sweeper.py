"""Background eviction of expired session entries."""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Optional

from ..config.logging import LoggerMixin
from ..models.session import SweeperState
from ..utils.date_utils import utc_now

SweepFunc = Callable[[], Awaitable[int]]


class EvictionSweeper(LoggerMixin):
    """Cancellable periodic task that reclaims expired entries.

    The sweeper only bounds storage growth. Stores filter expired entries on
    every read, so a sweeper that is late, failing or disabled never makes an
    expired session visible.

    An interval of zero or less disables the sweeper: ``start`` leaves it
    STOPPED and ``stop`` returns immediately.
    """

    def __init__(self, interval_seconds: float, sweep: SweepFunc, name: str = "sessions") -> None:
        self.interval_seconds = interval_seconds
        self.name = name
        self._sweep = sweep
        self._task: Optional[asyncio.Task] = None
        self._state = SweeperState.STOPPED

        self.last_sweep_at: Optional[datetime] = None
        self.last_removed = 0
        self.total_removed = 0

    @property
    def state(self) -> SweeperState:
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the sweeper loop is active."""
        return self._state == SweeperState.RUNNING

    @property
    def enabled(self) -> bool:
        return self.interval_seconds > 0

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if not self.enabled:
            self.logger.debug("Sweeper disabled", sweeper=self.name)
            return
        if self._state != SweeperState.STOPPED:
            return

        self._task = asyncio.create_task(self._run(), name=f"sweeper:{self.name}")
        self._state = SweeperState.RUNNING
        self.logger.info(
            "Sweeper started",
            sweeper=self.name,
            interval_seconds=self.interval_seconds,
        )

    async def stop(self) -> None:
        """Cancel future sweeps and wait for the loop to exit.

        Safe to call on a sweeper that was never started. A call made while
        another stop is in progress returns without waiting for it.
        """
        if self._state != SweeperState.RUNNING:
            return

        self._state = SweeperState.STOPPING
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._state = SweeperState.STOPPED
        self.logger.info("Sweeper stopped", sweeper=self.name, total_removed=self.total_removed)

    async def sweep_now(self) -> int:
        """Run a single sweep immediately. Errors propagate to the caller."""
        removed = await self._sweep()
        self._record(removed)
        return removed

    async def _run(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                removed = await self._sweep()
                self._record(removed)
                if removed:
                    self.logger.debug("Expired sessions swept", sweeper=self.name, removed=removed)
            except asyncio.CancelledError:
                break
            except Exception as e:
                # Next tick retries; the loop only ends on cancellation.
                self.logger.error("Error in sweep loop", sweeper=self.name, error=str(e))

    def _record(self, removed: int) -> None:
        self.last_sweep_at = utc_now()
        self.last_removed = removed
        self.total_removed += removed
