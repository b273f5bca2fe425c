"""
Periodic background task with explicit cancellation and manual triggering.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """One-shot cancellation flag shared between a task and its owner."""

    def __init__(self):
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run `callback` on cancellation (immediately if already cancelled)."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


class PeriodicTask:
    """
    Runs an async callback every `interval` seconds on the running event loop.

    - `trigger()` runs the callback immediately, out of cycle, and restarts the interval
    - cancelling the token stops the loop and cancels an in-flight run
    - an exception in the callback is logged and the loop keeps going
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: float,
        *,
        name: str = "periodic-task",
        token: Optional[CancellationToken] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.name = name
        self.token = token or CancellationToken()
        self.token.add_callback(self._on_cancel)
        self.runs = 0
        self._task: Optional[asyncio.Task] = None
        self._wake: Optional[asyncio.Event] = None
        self._waiters: List[asyncio.Future] = []

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop; the first run happens one interval from now."""
        if self.token.cancelled:
            raise RuntimeError(f"{self.name} was cancelled and cannot be restarted")
        if self.running:
            return
        self._wake = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name=self.name)

    def trigger(self) -> asyncio.Future:
        """
        Request an immediate run.

        Returns a future resolved with the callback's result once a run that
        started after this call completes (None if the run failed or the task
        was cancelled first).
        """
        if not self.running:
            raise RuntimeError(f"{self.name} is not running")
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        self._wake.set()
        return waiter

    def cancel(self) -> None:
        self.token.cancel()

    async def stop(self) -> None:
        """Cancel and wait for the loop to exit."""
        self.cancel()
        task, self._task = self._task, None
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _on_cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._resolve_waiters(self._waiters, None)
        self._waiters = []

    @staticmethod
    def _resolve_waiters(waiters: List[asyncio.Future], result: Any) -> None:
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(result)

    async def _run(self) -> None:
        while not self.token.cancelled:
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
            if self.token.cancelled:
                break
            self._wake.clear()
            waiters, self._waiters = self._waiters, []

            result = None
            try:
                result = await self.callback()
                self.runs += 1
            except Exception:
                logger.exception(f"{self.name}: scheduled run failed")
            finally:
                self._resolve_waiters(waiters, result)
