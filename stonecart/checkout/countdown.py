"""Passive reservation countdown.

Ticks once a second with the seconds remaining and flags expiry at zero. It
never releases anything; stopping it only cancels its task.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from ..log import get_logger

TickCallback = Callable[[int], None]


class ReservationCountdown:
    def __init__(
        self,
        seconds_remaining: Callable[[], int],
        on_tick: Optional[TickCallback] = None,
        on_expired: Optional[Callable[[], None]] = None,
        interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.seconds_remaining = seconds_remaining
        self.on_tick = on_tick
        self.on_expired = on_expired
        self.interval = interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self.expired = False
        self.log = get_logger(domain="checkout", component="countdown")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self.expired = False
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def stop(self) -> None:
        """Cancel any pending tick."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the countdown to reach zero or be stopped."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def __aenter__(self) -> "ReservationCountdown":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()
        await self.wait()

    async def _run(self) -> None:
        while True:
            remaining = self.seconds_remaining()
            if self.on_tick is not None:
                self.on_tick(remaining)
            if remaining <= 0:
                self.expired = True
                self.log.info("reservation_expired")
                if self.on_expired is not None:
                    self.on_expired()
                return
            await self._sleep(self.interval)
