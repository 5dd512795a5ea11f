"""Levels stage: input/output black and white points with midtone gamma."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from pixgrade.stages.kernels import apply_lut_numba, pixel_view

if TYPE_CHECKING:
    from pixgrade.buffer import PixelBuffer
    from pixgrade.config.values import GradingState, LevelsValues

logger = logging.getLogger(__name__)


def compile_levels_lut(levels: LevelsValues) -> np.ndarray:
    """Compile the levels lookup table.

    For each byte ``i``::

        t = clamp((i - input_black) / max(1, input_white - input_black), 0, 1)
        t = t ** (1 / gamma)                      # only when gamma != 1
        out = output_black + t * (output_white - output_black)
        lut[i] = round(clamp(out, 0, 255))

    :param levels: Levels parameters (clamped before use)
    :returns: LUT [256] uint8
    """
    v = levels.clamp()
    input_range = max(1.0, v.input_white - v.input_black)
    output_range = v.output_white - v.output_black

    t = (np.arange(256, dtype=np.float64) - v.input_black) / input_range
    t = np.clip(t, 0.0, 1.0)
    if v.gamma != 1.0:
        t = np.power(t, 1.0 / v.gamma)

    out = v.output_black + t * output_range
    # Round half up
    return np.floor(np.clip(out, 0.0, 255.0) + 0.5).astype(np.uint8)


class LevelsStage:
    """Buffer stage applying the levels LUT to R, G and B."""

    name = "levels"

    def is_neutral(self, state: GradingState) -> bool:
        return state.levels.is_neutral()

    def apply(self, buffer: PixelBuffer, state: GradingState) -> PixelBuffer:
        lut = compile_levels_lut(state.levels)
        apply_lut_numba(pixel_view(buffer.data), lut)
        logger.debug("[LevelsStage] Applied %s", state.levels)
        return buffer
