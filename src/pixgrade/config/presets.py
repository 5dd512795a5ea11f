"""Preset library for grading states.

Presets are stored as plain dictionaries (the ``GradingState.to_dict``
layout) so every lookup returns a fresh, independently mutable state.

These helpers are host-facing only: the engine itself never reads or writes
files and never persists a session's state. A host may use the JSON helpers
to share a look between images.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pixgrade.config.values import GradingState

logger = logging.getLogger(__name__)

# ============================================================================
# Grading Presets
# ============================================================================

NEUTRAL: dict[str, Any] = {}

WARM = {"temperature_tint": {"temperature": 35.0, "tint": 5.0}}

COOL = {"temperature_tint": {"temperature": -35.0}}

HIGH_CONTRAST = {
    "curves": {"master": [[0.0, 0.0], [0.25, 0.18], [0.75, 0.84], [1.0, 1.0]]},
}

FADED = {
    "curves": {"master": [[0.0, 0.1], [0.5, 0.52], [1.0, 0.92]]},
    "finish": {"saturation": -20.0},
}

CROSS_PROCESS = {
    "curves": {
        "red": [[0.0, 0.0], [0.3, 0.25], [0.7, 0.8], [1.0, 1.0]],
        "blue": [[0.0, 0.12], [1.0, 0.88]],
    },
    "finish": {"saturation": 15.0},
}

TEAL_ORANGE = {
    "color_balance": {
        "shadows_cyan_red": -30.0,
        "shadows_yellow_blue": 25.0,
        "highlights_cyan_red": 30.0,
        "highlights_yellow_blue": -25.0,
    },
    "finish": {"saturation": 10.0},
}

CRUSHED_BLACKS = {"levels": {"input_black": 25.0, "gamma": 0.9}}

MATTE = {"levels": {"output_black": 30.0, "output_white": 235.0}}

CRISP = {"finish": {"sharpen": 30.0, "clarity": 20.0}}

VIGNETTE = {"finish": {"vignette_amount": -40.0, "vignette_feather": 60.0}}

MONOCHROME = {"finish": {"saturation": -100.0}, "levels": {"gamma": 1.1}}

GRADING_PRESETS: dict[str, dict[str, Any]] = {
    "neutral": NEUTRAL,
    "warm": WARM,
    "cool": COOL,
    "high_contrast": HIGH_CONTRAST,
    "faded": FADED,
    "cross_process": CROSS_PROCESS,
    "teal_orange": TEAL_ORANGE,
    "crushed_blacks": CRUSHED_BLACKS,
    "matte": MATTE,
    "crisp": CRISP,
    "vignette": VIGNETTE,
    "monochrome": MONOCHROME,
}


def get_preset(name: str) -> GradingState:
    """Get grading preset by name.

    :param name: Preset name (case-insensitive)
    :returns: New GradingState
    :raises KeyError: If preset not found
    """
    name_lower = name.lower()
    if name_lower not in GRADING_PRESETS:
        available = ", ".join(GRADING_PRESETS.keys())
        raise KeyError(f"Unknown grading preset '{name}'. Available: {available}")
    return GradingState.from_dict(GRADING_PRESETS[name_lower])


# ============================================================================
# Dict/JSON Loading
# ============================================================================


def state_from_dict(d: dict) -> GradingState:
    """Create GradingState from dictionary; values are clamped.

    :param d: Dictionary with any subset of the state groups
    :returns: GradingState instance
    :raises ValueError: On unknown groups or fields

    Example:
        >>> d = {"levels": {"gamma": 1.2}, "temperature_tint": {"temperature": 20}}
        >>> state = state_from_dict(d)
    """
    valid_groups = {"curves", "levels", "temperature_tint", "color_balance", "finish"}
    unknown = set(d) - valid_groups
    if unknown:
        raise ValueError(f"Unknown grading groups: {sorted(unknown)}")

    state = GradingState.from_dict(d)
    state.levels = state.levels.clamp()
    state.temperature_tint = state.temperature_tint.clamp()
    state.color_balance = state.color_balance.clamp()
    state.finish = state.finish.clamp()
    return state


def state_to_dict(state: GradingState) -> dict:
    """Convert GradingState to dictionary.

    :param state: GradingState instance
    :returns: Dictionary with all groups
    """
    return state.to_dict()


def load_state_json(path: str | Path) -> GradingState:
    """Load GradingState from JSON file.

    :param path: Path to JSON file
    :returns: GradingState instance
    """
    with open(path) as f:
        data = json.load(f)
    logger.info("Loaded grading preset from %s", path)
    return state_from_dict(data)


def save_state_json(state: GradingState, path: str | Path) -> None:
    """Save GradingState to JSON file.

    :param state: GradingState instance
    :param path: Output path
    """
    with open(path, "w") as f:
        json.dump(state_to_dict(state), f, indent=2)
    logger.info("Saved grading preset to %s", path)
