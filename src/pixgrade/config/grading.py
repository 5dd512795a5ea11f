"""Grading parameter configuration.

This module defines the standardized parameter specifications for every
slider of the grading engine: levels, temperature/tint, color balance, and
the delegated finishing filters.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from pixgrade.config.operations import OperationSpec


def _balance(name: str, axis: str) -> OperationSpec:
    return OperationSpec(
        name=name,
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description=f"Color balance {axis} shift: 0=no change",
    )


@dataclass(frozen=True)
class GradingConfig:
    """Configuration for all grading parameters.

    Ranges follow the editor sliders: bytes for levels, [-100, 100] for the
    signed sliders and [0, 100] for the one-sided ones.
    """

    # Levels
    input_black: OperationSpec = OperationSpec(
        name="input_black",
        min_value=0.0,
        max_value=255.0,
        default=0.0,
        neutral=0.0,
        description="Input black point: bytes at or below map to output black",
    )

    input_white: OperationSpec = OperationSpec(
        name="input_white",
        min_value=0.0,
        max_value=255.0,
        default=255.0,
        neutral=255.0,
        description="Input white point: bytes at or above map to output white",
    )

    output_black: OperationSpec = OperationSpec(
        name="output_black",
        min_value=0.0,
        max_value=255.0,
        default=0.0,
        neutral=0.0,
        description="Output black level",
    )

    output_white: OperationSpec = OperationSpec(
        name="output_white",
        min_value=0.0,
        max_value=255.0,
        default=255.0,
        neutral=255.0,
        description="Output white level",
    )

    gamma: OperationSpec = OperationSpec(
        name="gamma",
        min_value=0.01,
        max_value=9.99,
        default=1.0,
        neutral=1.0,
        description="Midtone gamma: 1.0=linear, >1=brighter, <1=darker",
    )

    # Temperature / tint
    temperature: OperationSpec = OperationSpec(
        name="temperature",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Color temperature: -100=cool/blue, 0=neutral, 100=warm",
    )

    tint: OperationSpec = OperationSpec(
        name="tint",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Tint: negative=magenta, 0=neutral, positive=green",
    )

    # Color balance
    shadows_cyan_red: OperationSpec = _balance("shadows_cyan_red", "cyan/red")
    shadows_magenta_green: OperationSpec = _balance("shadows_magenta_green", "magenta/green")
    shadows_yellow_blue: OperationSpec = _balance("shadows_yellow_blue", "yellow/blue")
    midtones_cyan_red: OperationSpec = _balance("midtones_cyan_red", "cyan/red")
    midtones_magenta_green: OperationSpec = _balance("midtones_magenta_green", "magenta/green")
    midtones_yellow_blue: OperationSpec = _balance("midtones_yellow_blue", "yellow/blue")
    highlights_cyan_red: OperationSpec = _balance("highlights_cyan_red", "cyan/red")
    highlights_magenta_green: OperationSpec = _balance("highlights_magenta_green", "magenta/green")
    highlights_yellow_blue: OperationSpec = _balance("highlights_yellow_blue", "yellow/blue")

    # Delegated finishing filters
    hue: OperationSpec = OperationSpec(
        name="hue",
        min_value=-180.0,
        max_value=180.0,
        default=0.0,
        neutral=0.0,
        description="Hue rotation in degrees",
    )

    saturation: OperationSpec = OperationSpec(
        name="saturation",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Saturation: -100=grayscale, 0=no change",
    )

    lightness: OperationSpec = OperationSpec(
        name="lightness",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Lightness, applied as a brightness offset",
    )

    sharpen: OperationSpec = OperationSpec(
        name="sharpen",
        min_value=0.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Sharpen convolution strength",
    )

    clarity: OperationSpec = OperationSpec(
        name="clarity",
        min_value=0.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Clarity (local contrast) convolution strength",
    )

    vignette_amount: OperationSpec = OperationSpec(
        name="vignette_amount",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Vignette: negative=darken edges, positive=lighten edges",
    )

    vignette_feather: OperationSpec = OperationSpec(
        name="vignette_feather",
        min_value=0.0,
        max_value=100.0,
        default=50.0,
        neutral=50.0,
        description="Vignette edge softness",
    )

    def get_spec(self, name: str) -> OperationSpec:
        """Get specification by parameter name.

        :param name: Parameter name
        :returns: OperationSpec for the parameter
        :raises KeyError: If parameter not found
        """
        spec = getattr(self, name, None)
        if not isinstance(spec, OperationSpec):
            raise KeyError(f"Unknown grading parameter: {name}")
        return spec

    def get_all_specs(self) -> dict[str, OperationSpec]:
        """Get all parameter specifications.

        :returns: Dictionary mapping parameter names to specs
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class EditorConfig:
    """Constants of the interactive curve editor, in normalized units.

    Attributes:
        hit_threshold: Half-size of the box around a point that counts as a hit
        insert_margin: Clicks closer than this to x=0 or x=1 never insert
        drag_epsilon: Minimum x gap kept between neighbouring points
        identity_tolerance: Tolerance of the cheap "default curve" check
    """

    hit_threshold: float = 0.06
    insert_margin: float = 0.02
    drag_epsilon: float = 0.01
    identity_tolerance: float = 1e-3
