"""Configuration, parameter values and presets."""

from pixgrade.config.config import CONFIG, EDITOR_CONFIG, GRADING_CONFIG, PixgradeConfig
from pixgrade.config.grading import EditorConfig, GradingConfig
from pixgrade.config.operations import OperationSpec
from pixgrade.config.values import (
    ColorBalanceValues,
    FinishValues,
    GradingState,
    LevelsValues,
    TemperatureTintValues,
)

__all__ = [
    "CONFIG",
    "EDITOR_CONFIG",
    "GRADING_CONFIG",
    "PixgradeConfig",
    "EditorConfig",
    "GradingConfig",
    "OperationSpec",
    "ColorBalanceValues",
    "FinishValues",
    "GradingState",
    "LevelsValues",
    "TemperatureTintValues",
]
