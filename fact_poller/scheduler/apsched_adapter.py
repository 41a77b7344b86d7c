"""APScheduler-backed fixed-rate ticker."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

TICK_PERIOD_SECONDS = 2.0
TICK_JOB_ID = "ticker::fetch"


@dataclass(frozen=True, slots=True)
class Tick:
    index: int
    fired_at: datetime


TickCallback = Callable[[Tick], Awaitable[None]]


class Ticker:
    """Fire a coroutine callback immediately and then every ``period`` seconds.

    A tick that comes due while the previous callback is still running is
    skipped by the scheduler (``max_instances=1``), so callbacks never overlap.
    Once cancelled the ticker cannot be started again.
    """

    def __init__(
        self,
        period: float = TICK_PERIOD_SECONDS,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError("Ticker period must be positive")
        self.period = period
        self.scheduler: AsyncIOScheduler | None = None
        self.logger = logger or structlog.get_logger("fact_poller.scheduler")
        self._tick_count = 0
        self._cancelled = False

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def started(self) -> bool:
        return self.scheduler is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self, callback: TickCallback) -> None:
        """Start ticking; must be called from inside the running event loop."""

        if self._cancelled:
            raise RuntimeError("Ticker cannot be restarted after cancellation")
        if self.scheduler is not None:
            raise RuntimeError("Ticker already started")
        self.scheduler = AsyncIOScheduler(
            event_loop=asyncio.get_running_loop(), timezone=timezone.utc
        )
        self.scheduler.add_job(
            self._fire,
            trigger=IntervalTrigger(seconds=self.period, timezone=timezone.utc),
            id=TICK_JOB_ID,
            args=[callback],
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
            replace_existing=True,
        )
        self.scheduler.start()
        self.logger.info("ticker_started", period=self.period)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self.scheduler is not None and self.scheduler.running:
            # The asyncio executor cancels the running tick task on shutdown
            self.scheduler.shutdown(wait=False)
        self.logger.info("ticker_stopped", ticks=self._tick_count)

    async def _fire(self, callback: TickCallback) -> None:
        if self._cancelled:
            return
        tick = Tick(index=self._tick_count, fired_at=datetime.now(timezone.utc))
        self._tick_count += 1
        try:
            await callback(tick)
        except asyncio.CancelledError:
            # The executor would otherwise report cancellation as a job crash
            self.logger.debug("tick_cancelled", tick=tick.index)


__all__ = ["TICK_JOB_ID", "TICK_PERIOD_SECONDS", "Tick", "TickCallback", "Ticker"]
