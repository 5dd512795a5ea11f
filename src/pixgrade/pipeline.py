"""Grading pipeline orchestrator.

Runs the buffer stages in their fixed order over a fresh copy of the
original pixels:

    Curves -> Levels -> Temperature/Tint -> Color Balance

Each stage is skipped when its parameters are neutral. The order is part of
the output contract (curves then levels differs from levels then curves).

Example:
    >>> from pixgrade import GradingPipeline, GradingState
    >>>
    >>> state = GradingState()
    >>> state.levels.input_black = 20
    >>> state.temperature_tint.temperature = 35
    >>>
    >>> result = GradingPipeline().run(original, state)
    >>> result.applied
    ('levels', 'temperature_tint')
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from pixgrade.buffer import PixelBuffer
from pixgrade.config.values import GradingState
from pixgrade.curves.compositor import CurvesStage
from pixgrade.protocols import PixelStage
from pixgrade.stages import ColorBalanceStage, LevelsStage, TemperatureTintStage

logger = logging.getLogger(__name__)


def default_stages() -> tuple[PixelStage, ...]:
    """The buffer stages in their fixed order."""
    return (CurvesStage(), LevelsStage(), TemperatureTintStage(), ColorBalanceStage())


@dataclass
class PipelineResult:
    """Output of one pipeline run.

    Attributes:
        buffer: Graded working buffer (never the original)
        applied: Names of the stages that ran, in order
        skipped: Names of the stages skipped as neutral
    """

    buffer: PixelBuffer
    applied: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()


@dataclass
class GradingPipeline:
    """Fixed-order composition of buffer stages.

    The working buffer is always a new copy of ``original``; no stage ever
    sees a previously rendered result.
    """

    stages: Sequence[PixelStage] = field(default_factory=default_stages)

    def run(self, original: PixelBuffer, state: GradingState) -> PipelineResult:
        """Grade a copy of ``original``.

        :param original: Source pixels (left untouched, may be read-only)
        :param state: Grading parameters, read once at call time
        :returns: PipelineResult with the graded copy
        """
        working = original.copy()
        applied: list[str] = []
        skipped: list[str] = []

        for stage in self.stages:
            if stage.is_neutral(state):
                skipped.append(stage.name)
                continue
            stage.apply(working, state)
            applied.append(stage.name)

        logger.debug(
            "[GradingPipeline] %s graded, applied=%s skipped=%s",
            original,
            applied,
            skipped,
        )
        return PipelineResult(buffer=working, applied=tuple(applied), skipped=tuple(skipped))

    def __call__(self, original: PixelBuffer, state: GradingState) -> PixelBuffer:
        """Shorthand for ``run(original, state).buffer``."""
        return self.run(original, state).buffer


def grade(original: PixelBuffer, state: GradingState) -> PixelBuffer:
    """Grade a copy of ``original`` with the default stages."""
    return GradingPipeline().run(original, state).buffer
