"""Color balance stage.

Each color axis is shifted by half the average of its shadows, midtones and
highlights sliders. The shift is flat: it does not depend on whether a pixel
actually lies in the shadow, midtone or highlight range.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pixgrade.stages.kernels import apply_channel_luts_numba, offset_lut, pixel_view

if TYPE_CHECKING:
    from pixgrade.buffer import PixelBuffer
    from pixgrade.config.values import GradingState

logger = logging.getLogger(__name__)

BALANCE_STRENGTH = 0.5


class ColorBalanceStage:
    """Buffer stage applying the averaged color balance shifts."""

    name = "color_balance"

    def is_neutral(self, state: GradingState) -> bool:
        return state.color_balance.is_neutral()

    def apply(self, buffer: PixelBuffer, state: GradingState) -> PixelBuffer:
        cyan_red, magenta_green, yellow_blue = state.color_balance.axis_shifts()
        apply_channel_luts_numba(
            pixel_view(buffer.data),
            offset_lut(cyan_red * BALANCE_STRENGTH),
            offset_lut(magenta_green * BALANCE_STRENGTH),
            offset_lut(yellow_blue * BALANCE_STRENGTH),
        )
        logger.debug(
            "[ColorBalanceStage] Shifts cr=%.2f mg=%.2f yb=%.2f",
            cyan_red,
            magenta_green,
            yellow_blue,
        )
        return buffer
