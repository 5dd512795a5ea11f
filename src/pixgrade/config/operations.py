"""Slider specifications.

Every grading slider is described by an :class:`OperationSpec`: its range,
its default and the neutral value at which the owning stage becomes a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real


@dataclass(frozen=True)
class OperationSpec:
    """Range, default and neutral value of one slider.

    Attributes:
        name: Slider name as used in the value classes (e.g. "input_black")
        min_value: Lower bound
        max_value: Upper bound
        default: Initial slider position
        neutral: Position that leaves pixels unchanged
        description: Short note for tooltips and docs
    """

    name: str
    min_value: float
    max_value: float
    default: float
    neutral: float
    description: str = ""

    def validate(self, value: float) -> float:
        """Clamp ``value`` into [min_value, max_value].

        Out-of-range numbers are never rejected, only clamped; NaN resets to
        the default.

        :param value: Slider value
        :returns: Clamped float
        :raises ValueError: If value is not a real number
        """
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValueError(f"{self.name}: expected number, got {type(value).__name__}")

        if value != value:
            return self.default

        return max(self.min_value, min(self.max_value, float(value)))

    def is_neutral(self, value: float, tolerance: float = 0.0) -> bool:
        """Check whether ``value`` sits at the neutral position.

        :param value: Slider value
        :param tolerance: Allowed distance from neutral (exact by default)
        """
        return abs(value - self.neutral) <= tolerance

    def __repr__(self) -> str:
        return (
            f"OperationSpec({self.name}: {self.min_value}..{self.max_value}, "
            f"default={self.default}, neutral={self.neutral})"
        )
