"""Unified pixgrade configuration.

This module provides a top-level configuration dataclass that contains the
grading parameter specifications, the curve editor constants and the
recompute debounce delay.
"""

from __future__ import annotations

from dataclasses import dataclass

from pixgrade.config.grading import EditorConfig, GradingConfig


@dataclass(frozen=True)
class PixgradeConfig:
    """Top-level configuration.

    Provides hierarchical access to all specifications:
        CONFIG.grading.temperature
        CONFIG.editor.hit_threshold
        CONFIG.debounce_ms

    Attributes:
        grading: Grading parameter specifications
        editor: Curve editor constants
        debounce_ms: Delay between the last parameter edit and the recompute
    """

    grading: GradingConfig = GradingConfig()
    editor: EditorConfig = EditorConfig()
    debounce_ms: float = 16.0

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


# Main singleton instance
CONFIG = PixgradeConfig()

GRADING_CONFIG = CONFIG.grading
EDITOR_CONFIG = CONFIG.editor
