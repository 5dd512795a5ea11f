"""Grading parameter value dataclasses.

Each group of sliders is a plain dataclass with ``clamp()`` (out-of-range
values are clamped, never rejected), ``is_neutral()`` (the stage can be
skipped), and dict round-tripping for presets.

Example:
    >>> levels = LevelsValues(input_black=20, input_white=235)
    >>> levels.is_neutral()
    False
    >>> TemperatureTintValues(temperature=250).clamp().temperature
    100.0
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import TYPE_CHECKING, Any

import numpy as np

from pixgrade.config.config import GRADING_CONFIG

if TYPE_CHECKING:
    from pixgrade.curves.compositor import ChannelCurves


def _clamp_fields(values: Any) -> dict[str, float]:
    """Clamp every field of a values dataclass through its OperationSpec."""
    return {
        f.name: GRADING_CONFIG.get_spec(f.name).validate(getattr(values, f.name))
        for f in fields(values)
    }


def _neutral_fields(values: Any) -> bool:
    return all(
        GRADING_CONFIG.get_spec(f.name).is_neutral(getattr(values, f.name)) for f in fields(values)
    )


def _from_dict(cls, data: dict[str, Any]):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**data)


@dataclass
class LevelsValues:
    """Input/output levels with midtone gamma.

    Byte fields are in [0, 255]; ``gamma`` is positive, 1.0 meaning linear.
    """

    input_black: float = 0.0
    input_white: float = 255.0
    output_black: float = 0.0
    output_white: float = 255.0
    gamma: float = 1.0

    def clamp(self) -> LevelsValues:
        """Clamp all values to valid ranges.

        :returns: New LevelsValues with clamped values
        """
        return LevelsValues(**_clamp_fields(self))

    def is_neutral(self) -> bool:
        """Check if all values are neutral (no-op).

        :returns: True if applying these values would have no effect
        """
        return _neutral_fields(self)

    def compile_lut(self) -> np.ndarray:
        """Compile the 256-entry levels lookup table.

        :returns: LUT [256] uint8
        """
        from pixgrade.stages.levels import compile_levels_lut

        return compile_levels_lut(self)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LevelsValues:
        return _from_dict(cls, data)


@dataclass
class TemperatureTintValues:
    """Temperature (blue/amber) and tint (magenta/green), both in [-100, 100]."""

    temperature: float = 0.0
    tint: float = 0.0

    def clamp(self) -> TemperatureTintValues:
        return TemperatureTintValues(**_clamp_fields(self))

    def is_neutral(self) -> bool:
        return _neutral_fields(self)

    def channel_offsets(self) -> tuple[float, float, float]:
        """Compute the per-channel byte offsets.

        :returns: Tuple of (r, g, b) offsets
        """
        values = self.clamp()
        temp_factor = values.temperature / 100.0
        tint_factor = values.tint / 100.0
        return temp_factor * 30.0, tint_factor * 20.0, -temp_factor * 30.0

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemperatureTintValues:
        return _from_dict(cls, data)


@dataclass
class ColorBalanceValues:
    """Color balance sliders: three tonal ranges times three color axes.

    The applied shift is a flat average across ranges: each axis is shifted
    by the mean of its shadows, midtones and highlights sliders, regardless
    of pixel luminance.

    Example:
        >>> ColorBalanceValues(midtones_cyan_red=30).axis_shifts()
        (10.0, 0.0, 0.0)
    """

    shadows_cyan_red: float = 0.0
    shadows_magenta_green: float = 0.0
    shadows_yellow_blue: float = 0.0
    midtones_cyan_red: float = 0.0
    midtones_magenta_green: float = 0.0
    midtones_yellow_blue: float = 0.0
    highlights_cyan_red: float = 0.0
    highlights_magenta_green: float = 0.0
    highlights_yellow_blue: float = 0.0

    def clamp(self) -> ColorBalanceValues:
        return ColorBalanceValues(**_clamp_fields(self))

    def is_neutral(self) -> bool:
        return _neutral_fields(self)

    def axis_shifts(self) -> tuple[float, float, float]:
        """Average each axis across the three tonal ranges.

        :returns: Tuple of (cyan_red, magenta_green, yellow_blue) shifts
        """
        v = self.clamp()
        cyan_red = (v.shadows_cyan_red + v.midtones_cyan_red + v.highlights_cyan_red) / 3
        magenta_green = (
            v.shadows_magenta_green + v.midtones_magenta_green + v.highlights_magenta_green
        ) / 3
        yellow_blue = (
            v.shadows_yellow_blue + v.midtones_yellow_blue + v.highlights_yellow_blue
        ) / 3
        return cyan_red, magenta_green, yellow_blue

    def get(self, tonal_range: str, axis: str) -> float:
        """Read one slider, e.g. ``get("shadows", "cyan_red")``."""
        return getattr(self, f"{tonal_range}_{axis}")

    def set(self, tonal_range: str, axis: str, value: float) -> None:
        """Write one slider, e.g. ``set("highlights", "yellow_blue", -20)``."""
        name = f"{tonal_range}_{axis}"
        if not hasattr(self, name):
            raise KeyError(f"Unknown color balance slider: {name}")
        setattr(self, name, value)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ColorBalanceValues:
        return _from_dict(cls, data)


@dataclass
class FinishValues:
    """Parameters of the delegated finishing filters.

    These are not applied by the buffer stages. They are turned into a
    filter list handed to the host's filter backend.
    """

    hue: float = 0.0
    saturation: float = 0.0
    lightness: float = 0.0
    sharpen: float = 0.0
    clarity: float = 0.0
    vignette_amount: float = 0.0
    vignette_feather: float = 50.0

    def clamp(self) -> FinishValues:
        return FinishValues(**_clamp_fields(self))

    def is_neutral(self) -> bool:
        """Check if no finishing filter would be emitted.

        Feather alone has no visible effect without a vignette amount.
        """
        return (
            self.hue == 0.0
            and self.saturation == 0.0
            and self.lightness == 0.0
            and self.sharpen <= 0.0
            and self.clarity <= 0.0
            and self.vignette_amount == 0.0
        )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FinishValues:
        return _from_dict(cls, data)


def _default_curves() -> ChannelCurves:
    from pixgrade.curves.compositor import ChannelCurves

    return ChannelCurves()


@dataclass
class GradingState:
    """Aggregate of every grading parameter for one selected image.

    Instances are owned by a session and discarded when the selection
    changes; they are never persisted by the engine itself.
    """

    curves: ChannelCurves = field(default_factory=_default_curves)
    levels: LevelsValues = field(default_factory=LevelsValues)
    temperature_tint: TemperatureTintValues = field(default_factory=TemperatureTintValues)
    color_balance: ColorBalanceValues = field(default_factory=ColorBalanceValues)
    finish: FinishValues = field(default_factory=FinishValues)

    def is_neutral(self) -> bool:
        """Check if the state would leave the image untouched."""
        return (
            self.curves.is_identity()
            and self.levels.is_neutral()
            and self.temperature_tint.is_neutral()
            and self.color_balance.is_neutral()
            and self.finish.is_neutral()
        )

    def reset(self) -> None:
        """Return every parameter to neutral, in place.

        The curve objects are kept (and reset), so editors bound to them stay
        attached to this state.
        """
        self.curves.reset()
        self.levels = LevelsValues()
        self.temperature_tint = TemperatureTintValues()
        self.color_balance = ColorBalanceValues()
        self.finish = FinishValues()

    def copy(self) -> GradingState:
        """Deep copy, safe to mutate independently."""
        return GradingState.from_dict(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return {
            "curves": self.curves.to_dict(),
            "levels": self.levels.to_dict(),
            "temperature_tint": self.temperature_tint.to_dict(),
            "color_balance": self.color_balance.to_dict(),
            "finish": self.finish.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GradingState:
        """Create state from dictionary; missing groups take their defaults.

        :param data: Dictionary as produced by ``to_dict``
        :returns: New GradingState
        """
        from pixgrade.curves.compositor import ChannelCurves

        return cls(
            curves=ChannelCurves.from_dict(data.get("curves", {})),
            levels=LevelsValues.from_dict(data.get("levels", {})),
            temperature_tint=TemperatureTintValues.from_dict(data.get("temperature_tint", {})),
            color_balance=ColorBalanceValues.from_dict(data.get("color_balance", {})),
            finish=FinishValues.from_dict(data.get("finish", {})),
        )
