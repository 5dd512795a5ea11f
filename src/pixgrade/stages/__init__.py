"""
Buffer stages - per-pixel transforms compiled into byte lookup tables.

Each stage is independently skippable and operates in-place on the working
copy of the original buffer.

Example:
    >>> from pixgrade.stages import LevelsStage
    >>> stage = LevelsStage()
    >>> if not stage.is_neutral(state):
    ...     stage.apply(buffer, state)
"""

from pixgrade.stages.balance import ColorBalanceStage
from pixgrade.stages.levels import LevelsStage, compile_levels_lut
from pixgrade.stages.temperature import TemperatureTintStage

__all__ = [
    "ColorBalanceStage",
    "LevelsStage",
    "TemperatureTintStage",
    "compile_levels_lut",
]
