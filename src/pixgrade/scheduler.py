"""Debounced recompute scheduler.

Coalesces bursts of parameter edits into a single recompute on an asyncio
event loop. Every :meth:`DebouncedScheduler.schedule` call cancels the
pending timer and arms a new one, so across N edits inside one delay window
exactly one callback runs, reading whatever state is current at that time.

Each run is stamped with a monotonically increasing generation. Work that
completes asynchronously after a newer run has started is recognised as
stale through :meth:`DebouncedScheduler.is_current`.

Example:
    >>> scheduler = DebouncedScheduler(recompute, delay=0.016)
    >>> for value in slider_values:
    ...     state.temperature_tint.temperature = value
    ...     scheduler.schedule()
    >>> # ~16ms later: recompute(generation) runs once, with the last value
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from pixgrade.config import CONFIG

logger = logging.getLogger(__name__)

RecomputeCallback = Callable[[int], Awaitable[None] | None]


class DebouncedScheduler:
    """Single-threaded, timer-driven debounce with generation tracking.

    :param callback: Called with the new generation number; may be a
        coroutine function, in which case it is run as a task
    :param delay: Debounce delay in seconds (default from ``CONFIG``)
    :param loop: Event loop to schedule on (default: the running loop)
    """

    def __init__(
        self,
        callback: RecomputeCallback,
        delay: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.callback = callback
        self.delay = CONFIG.debounce_seconds if delay is None else delay
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self.runs = 0

    @property
    def generation(self) -> int:
        """Generation of the most recently started run."""
        return self._generation

    @property
    def pending(self) -> bool:
        """True while a recompute is scheduled but has not run yet."""
        return self._handle is not None

    def is_current(self, generation: int) -> bool:
        """Check whether ``generation`` is still the latest run."""
        return generation == self._generation

    def schedule(self) -> None:
        """(Re)arm the timer, cancelling any pending recompute."""
        loop = self._loop or asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Cancel the pending recompute, if any.

        In-flight work cannot be cancelled; it is invalidated by bumping the
        generation so its result is discarded on completion.
        """
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._generation += 1

    def flush(self) -> None:
        """Run the pending recompute immediately."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    async def drain(self) -> None:
        """Wait for all recompute tasks started so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            self._tasks = {task for task in self._tasks if not task.done()}

    def _fire(self) -> None:
        self._handle = None
        self._generation += 1
        self.runs += 1
        generation = self._generation
        logger.debug("[DebouncedScheduler] Running generation %d", generation)

        try:
            result = self.callback(generation)
        except Exception:
            logger.exception("[DebouncedScheduler] Recompute %d failed", generation)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("[DebouncedScheduler] Recompute task failed", exc_info=exc)
