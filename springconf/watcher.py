"""Periodic re-resolution of configuration.

ConfigWatcher owns a single one-shot timer. When it fires, one resolution
pass runs; the next timer is only installed after that pass completes, so
passes never overlap and at most one timer is outstanding.
"""

import asyncio
from typing import Any, Awaitable, Callable

from springconf.errors import InvalidOptionsError
from springconf.events import ConfigEvent
from springconf.observability.logging import get_logger
from springconf.observability.metrics import WATCH_EVENTS

logger = get_logger(__name__)

DEFAULT_INTERVAL_MS = 60000


class ConfigWatcher:
    """Polls a resolver on an interval and reports the outcome.

    Stopping is cooperative: stop() only clears the running flag, so a
    timer that is already scheduled still fires once and its pass runs to
    completion before polling ends.
    """

    def __init__(
        self,
        resolve: Callable[[], Awaitable[dict[str, Any]]],
        on_refresh: Callable[[dict[str, Any]], Awaitable[None]],
        on_error: Callable[[Exception], Awaitable[None]],
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ):
        """Initialize watcher.

        Args:
            resolve: Coroutine function running one resolution pass
            on_refresh: Called with the composed config after a successful pass
            on_error: Called with the error after a failed pass
            interval_ms: Poll interval in milliseconds
        """
        self._resolve = resolve
        self._on_refresh = on_refresh
        self._on_error = on_error
        self._interval_ms = self._check_interval(interval_ms)
        self._running = False
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def pending(self) -> bool:
        """True while a timer is scheduled and has not fired."""
        return self._timer is not None and not self._timer.cancelled()

    @property
    def in_flight(self) -> bool:
        """True while a resolution pass started by the timer is running."""
        return self._in_flight is not None and not self._in_flight.done()

    def start(self, interval_ms: int | None = None) -> None:
        """Start polling, or restart the timer with a new interval.

        Must be called from within a running event loop. Any pending timer is
        cancelled before a new one is installed. While a pass is in flight no
        timer is installed; the pass reschedules itself when it completes.
        """
        if interval_ms is not None:
            self._interval_ms = self._check_interval(interval_ms)
        self._running = True

        if self.in_flight:
            self._cancel_timer()
            logger.debug("watch_restart_deferred", interval_ms=self._interval_ms)
            return

        self._schedule()
        logger.info("watch_started", interval_ms=self._interval_ms)

    def stop(self) -> None:
        """Stop polling after the current or already-scheduled pass."""
        self._running = False
        logger.info("watch_stopped")

    async def close(self) -> None:
        """Stop polling immediately, cancelling the timer and any running pass."""
        self._running = False
        self._cancel_timer()

        task, self._in_flight = self._in_flight, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        self._timer = loop.call_later(self._interval_ms / 1000, self._fire)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self._in_flight = asyncio.get_running_loop().create_task(self._poll())

    async def _poll(self) -> None:
        try:
            config = await self._resolve()
        except Exception as e:
            WATCH_EVENTS.labels(event=ConfigEvent.CONFIG_ERROR.value).inc()
            logger.warning("watch_refresh_failed", error=str(e))
            await self._on_error(e)
        else:
            WATCH_EVENTS.labels(event=ConfigEvent.CONFIG_REFRESH.value).inc()
            logger.debug("watch_refresh_succeeded")
            await self._on_refresh(config)
        finally:
            self._in_flight = None
            if self._running:
                self._schedule()

    @staticmethod
    def _check_interval(interval_ms: int) -> int:
        if interval_ms <= 0:
            raise InvalidOptionsError(f"Watch interval must be positive, got {interval_ms}")
        return interval_ms
