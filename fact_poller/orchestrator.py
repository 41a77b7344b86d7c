"""Pipeline controller wiring ticker, fetch stage, dedup and result delivery."""

from __future__ import annotations

import asyncio
from enum import Enum
from threading import Lock
from typing import Callable

import structlog

from .engine import (
    DeduplicationFilter,
    Error,
    FactService,
    FallbackProvider,
    FetchStage,
    MessageCatalog,
    Result,
    ResultMapper,
)
from .scheduler import Tick, Ticker

Subscriber = Callable[[Result], None]


class PipelineState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    STOPPED = "stopped"


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class Subscription:
    """Handle returned by :meth:`PipelineController.activate`."""

    def __init__(self, controller: "PipelineController") -> None:
        self._controller = controller

    @property
    def active(self) -> bool:
        return self._controller.state is PipelineState.ACTIVE

    def cancel(self) -> None:
        self._controller.deactivate()


class PipelineController:
    """Own a single activation of tick -> fetch -> dedup -> deliver.

    Tick jobs run as scheduler tasks and push results onto a queue; a separate
    delivery task hands them to the subscriber in tick order. Deactivation is
    terminal: a new activation needs a new controller, which also means a fresh
    deduplication state.
    """

    def __init__(
        self,
        service: FactService,
        fallback: FallbackProvider,
        messages: MessageCatalog | None = None,
        ticker: Ticker | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.logger = logger or structlog.get_logger("fact_poller.controller")
        self.stage = FetchStage(service, fallback, logger=self.logger)
        self.dedup = DeduplicationFilter()
        self.mapper = ResultMapper(messages or MessageCatalog())
        self.ticker = ticker or Ticker(logger=self.logger)
        self._state = PipelineState.IDLE
        self._lock = Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[Result] | None = None
        self._delivery_task: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None
        self._subscriber: Subscriber | None = None
        self._failed = False
        self._released = False

    @property
    def state(self) -> PipelineState:
        return self._state

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def activate(self, subscriber: Subscriber) -> Subscription:
        """Start ticking and deliver every result to ``subscriber``.

        Must be called from inside a running event loop. If the pipeline cannot
        be set up, the subscriber receives a single :class:`Error` right away and
        the controller ends up stopped.
        """

        with self._lock:
            if self._state is not PipelineState.IDLE:
                raise RuntimeError("Pipeline controller cannot be reactivated; build a new one")
            self._state = PipelineState.ACTIVE
        self._subscriber = subscriber
        subscription = Subscription(self)
        try:
            self._loop = asyncio.get_running_loop()
            self._queue = asyncio.Queue()
            self._delivery_task = self._loop.create_task(self._deliver())
            self._delivery_task.add_done_callback(self._on_delivery_done)
            self.ticker.start(self._on_tick)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("pipeline_start_failed", error=str(exc), exc_type=type(exc).__name__)
            with self._lock:
                self._state = PipelineState.STOPPED
            self._release()
            subscriber(self.mapper.failure(exc))
            return subscription
        self.logger.info("pipeline_activated", period=self.ticker.period)
        return subscription

    def deactivate(self) -> None:
        """Stop the pipeline; safe to call repeatedly and from any thread."""

        with self._lock:
            if self._state is PipelineState.STOPPED:
                return
            was_active = self._state is PipelineState.ACTIVE
            self._state = PipelineState.STOPPED
        if not was_active:
            return
        if self._loop is None or self._in_loop_thread():
            self._release()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._release)
        self.logger.info("pipeline_deactivated", ticks=self.ticker.tick_count)

    def _in_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        self.ticker.cancel()
        current = _current_task()
        for task in (self._inflight, self._delivery_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
        self._inflight = None
        if self._queue is not None:
            while not self._queue.empty():
                self._queue.get_nowait()

    # ------------------------------------------------------------------
    # Tick path
    # ------------------------------------------------------------------
    async def _on_tick(self, tick: Tick) -> None:
        if self._state is not PipelineState.ACTIVE or self._failed:
            return
        self._inflight = asyncio.current_task()
        try:
            fact = await self.stage.fetch(tick.index)
        except Exception as exc:  # noqa: BLE001
            self._fail(exc)
            return
        finally:
            self._inflight = None
        if self._state is not PipelineState.ACTIVE:
            return
        if not self.dedup.accept(fact):
            self.logger.debug("fact_suppressed", tick=tick.index)
            return
        self._queue.put_nowait(self.mapper.success(fact))

    def _fail(self, exc: BaseException) -> None:
        if self._failed:
            return
        self._failed = True
        self.logger.error("pipeline_failed", error=str(exc), exc_type=type(exc).__name__)
        self._queue.put_nowait(self.mapper.failure(exc))

    # ------------------------------------------------------------------
    # Delivery path
    # ------------------------------------------------------------------
    async def _deliver(self) -> None:
        while self._state is PipelineState.ACTIVE:
            result = await self._queue.get()
            if self._state is not PipelineState.ACTIVE:
                return
            terminal = isinstance(result, Error)
            try:
                self._subscriber(result)
            except Exception as exc:  # noqa: BLE001
                if terminal:
                    self.deactivate()
                    raise
                self._fail(exc)
                continue
            if terminal:
                self.deactivate()
                return

    def _on_delivery_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.error("delivery_crashed", error=str(exc), exc_info=exc)


__all__ = ["PipelineController", "PipelineState", "Subscriber", "Subscription"]
