"""Temperature/tint stage.

Warm/cool shifts red up and blue down by up to 30 levels; tint shifts green
by up to 20 levels. Each channel is clamped independently.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pixgrade.stages.kernels import apply_channel_luts_numba, offset_lut, pixel_view

if TYPE_CHECKING:
    from pixgrade.buffer import PixelBuffer
    from pixgrade.config.values import GradingState

logger = logging.getLogger(__name__)


class TemperatureTintStage:
    """Buffer stage applying constant per-channel temperature/tint offsets."""

    name = "temperature_tint"

    def is_neutral(self, state: GradingState) -> bool:
        return state.temperature_tint.is_neutral()

    def apply(self, buffer: PixelBuffer, state: GradingState) -> PixelBuffer:
        dr, dg, db = state.temperature_tint.channel_offsets()
        apply_channel_luts_numba(
            pixel_view(buffer.data), offset_lut(dr), offset_lut(dg), offset_lut(db)
        )
        logger.debug("[TemperatureTintStage] Offsets r=%.2f g=%.2f b=%.2f", dr, dg, db)
        return buffer
