"""Grading session for the currently selected image.

A session owns the :class:`GradingState` of one selected image and turns
every parameter edit into a debounced recompute:

    edit -> DebouncedScheduler -> OriginalBufferCache copy -> GradingPipeline
         -> FilterHandoff (async decode) -> on_result(RenderedResult)

Results from a superseded recompute (an older generation whose decode
finished late) are discarded instead of overwriting a newer display.

Example:
    >>> session = GradingSession(on_result=host.swap_image)
    >>> session.select(image)
    >>> session.set_levels(input_black=20, input_white=235)
    >>> session.set_temperature_tint(temperature=40)
    >>> # one recompute ~16ms after the last edit
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

from pixgrade.cache import OriginalBufferCache
from pixgrade.config.values import GradingState
from pixgrade.curves.editor import CurveEditor
from pixgrade.handoff import FilterHandoff, PillowBackend, RenderedResult
from pixgrade.pipeline import GradingPipeline
from pixgrade.protocols import RasterBackend, SourceImage
from pixgrade.scheduler import DebouncedScheduler

logger = logging.getLogger(__name__)


class GradingSession:
    """Parameter state, scheduling and result delivery for one selection.

    :param on_result: Host callback receiving each committed result
    :param backend: Raster backend for the encode/decode boundary
    :param cache: Shared original buffer cache (one per host by default)
    :param pipeline: Buffer stage pipeline
    :param delay: Debounce delay in seconds (default from ``CONFIG``)
    """

    def __init__(
        self,
        on_result: Callable[[RenderedResult], None],
        backend: RasterBackend | None = None,
        cache: OriginalBufferCache | None = None,
        pipeline: GradingPipeline | None = None,
        delay: float | None = None,
    ):
        self.on_result = on_result
        self.cache = cache if cache is not None else OriginalBufferCache()
        self.pipeline = pipeline if pipeline is not None else GradingPipeline()
        self.handoff = FilterHandoff(backend if backend is not None else PillowBackend())
        self.scheduler = DebouncedScheduler(self._recompute, delay=delay)

        self.image: SourceImage | None = None
        self.state = GradingState()
        self.result: RenderedResult | None = None
        self.commits = 0
        self.stale_results = 0

    # ========================================================================
    # Selection
    # ========================================================================

    def select(self, image: SourceImage | None) -> None:
        """Switch the selected image.

        The state is reset in place and any pending or in-flight recompute is
        invalidated. An already decoded original is captured into the cache.
        """
        self.scheduler.cancel()
        self.image = image
        self.state.reset()
        self.result = None
        if image is not None:
            self.cache.prime(image)
            logger.info("[GradingSession] Selected %r", image)

    # ========================================================================
    # Parameter edits
    # ========================================================================

    def invalidate(self) -> None:
        """Schedule a recompute after a parameter change."""
        if self.image is None:
            return
        self.scheduler.schedule()

    def set_levels(self, **values: float) -> None:
        """Update levels fields, e.g. ``set_levels(gamma=1.2)``."""
        self.state.levels = replace(self.state.levels, **values)
        self.invalidate()

    def set_temperature_tint(self, **values: float) -> None:
        """Update ``temperature`` and/or ``tint``."""
        self.state.temperature_tint = replace(self.state.temperature_tint, **values)
        self.invalidate()

    def set_color_balance(self, tonal_range: str, axis: str, value: float) -> None:
        """Update one color balance slider, e.g. ``("shadows", "cyan_red", 25)``."""
        self.state.color_balance.set(tonal_range, axis, value)
        self.invalidate()

    def set_finish(self, **values: float) -> None:
        """Update finishing parameters (hue, saturation, lightness, sharpen, ...)."""
        self.state.finish = replace(self.state.finish, **values)
        self.invalidate()

    def set_curve(self, channel: str, points: Iterable[Sequence[float]]) -> None:
        """Replace the control points of one curve channel."""
        self.state.curves[channel].set_points(points)
        self.invalidate()

    def curve_editor(self, channel: str) -> CurveEditor:
        """Gesture handler for one curve channel; edits trigger recomputes."""
        return CurveEditor(self.state.curves[channel], on_change=self.invalidate)

    def reset_curve(self, channel: str | None = None) -> None:
        """Reset one curve channel, or all four."""
        self.state.curves.reset(channel)
        self.invalidate()

    def reset(self) -> None:
        """Reset every parameter to neutral."""
        self.state.reset()
        self.invalidate()

    # ========================================================================
    # Recompute
    # ========================================================================

    async def _recompute(self, generation: int) -> None:
        image = self.image
        if image is None:
            return

        original = self.cache.get(image)
        if original is None:
            logger.debug("[GradingSession] Original not ready, leaving display unchanged")
            return

        state = self.state
        graded = self.pipeline.run(original, state).buffer
        result = await self.handoff.render(graded, image, state.finish, generation)
        if result is None:
            return

        if not self.scheduler.is_current(generation) or image is not self.image:
            self.stale_results += 1
            logger.debug(
                "[GradingSession] Dropping stale generation %d (latest %d)",
                generation,
                self.scheduler.generation,
            )
            return

        self.result = result
        self.commits += 1
        self.on_result(result)

    async def wait(self) -> None:
        """Flush any pending recompute and wait for it to be delivered."""
        self.scheduler.flush()
        await self.scheduler.drain()
