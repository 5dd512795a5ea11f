"""Multi-channel curve compositor.

Combines the master, red, green and blue tone curves into one buffer stage.
Channel curves are always applied before the master curve:

    r'' = master[red[r]]
    g'' = master[green[g]]
    b'' = master[blue[b]]

Example:
    >>> curves = ChannelCurves()
    >>> curves.red.insert_point(0.5, 0.6)
    1
    >>> stage = CurvesStage()
    >>> stage.apply(buffer, state)  # state.curves is curves
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from pixgrade.config import EDITOR_CONFIG
from pixgrade.curves.spline import ToneCurve
from pixgrade.stages.kernels import apply_curves_numba, pixel_view

if TYPE_CHECKING:
    from pixgrade.buffer import PixelBuffer
    from pixgrade.config.values import GradingState

logger = logging.getLogger(__name__)

CHANNELS = ("master", "red", "green", "blue")


@dataclass
class ChannelCurves:
    """The four tone curves owned together by one graded image."""

    master: ToneCurve = field(default_factory=ToneCurve)
    red: ToneCurve = field(default_factory=ToneCurve)
    green: ToneCurve = field(default_factory=ToneCurve)
    blue: ToneCurve = field(default_factory=ToneCurve)

    def __getitem__(self, channel: str) -> ToneCurve:
        if channel == "rgb":
            channel = "master"
        if channel not in CHANNELS:
            raise KeyError(f"Unknown curve channel: {channel}")
        return getattr(self, channel)

    def is_identity(self) -> bool:
        """Check whether all four curves are the default identity.

        Cheap control-point check; LUT contents are never compared.
        """
        tolerance = EDITOR_CONFIG.identity_tolerance
        return all(self[ch].is_identity(tolerance) for ch in CHANNELS)

    def compile(self) -> np.ndarray:
        """Compile (or fetch cached) LUTs.

        :returns: Array [4, 256] uint8 in (red, green, blue, master) order
        """
        return np.stack([self.red.lut, self.green.lut, self.blue.lut, self.master.lut])

    def apply_pixel(self, r: int, g: int, b: int) -> tuple[int, int, int]:
        """Map one pixel through the composed curves."""
        master = self.master.lut
        return (
            int(master[self.red.lut[r]]),
            int(master[self.green.lut[g]]),
            int(master[self.blue.lut[b]]),
        )

    def reset(self, channel: str | None = None) -> None:
        """Reset one channel (``"master"``/``"rgb"``, ``"red"``, ...) or all."""
        channels = CHANNELS if channel is None else (channel,)
        for ch in channels:
            self[ch].reset()

    def copy(self) -> ChannelCurves:
        return ChannelCurves(**{ch: self[ch].copy() for ch in CHANNELS})

    def to_dict(self) -> dict[str, list[list[float]]]:
        return {ch: self[ch].to_list() for ch in CHANNELS}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChannelCurves:
        """Create curves from ``{"master": [[x, y], ...], ...}``; missing channels are identity."""
        unknown = set(data) - set(CHANNELS)
        if unknown:
            raise ValueError(f"Unknown curve channels: {sorted(unknown)}")
        return cls(**{ch: ToneCurve(points) for ch, points in data.items()})


class CurvesStage:
    """Buffer stage applying :class:`ChannelCurves`."""

    name = "curves"

    def is_neutral(self, state: GradingState) -> bool:
        return state.curves.is_identity()

    def apply(self, buffer: PixelBuffer, state: GradingState) -> PixelBuffer:
        luts = state.curves.compile()
        apply_curves_numba(pixel_view(buffer.data), luts[0], luts[1], luts[2], luts[3])
        logger.debug("[CurvesStage] Applied to %d pixels", buffer.size)
        return buffer
