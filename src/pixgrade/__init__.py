"""
pixgrade - Non-destructive raster color grading

LUT-compiled color grading engine for decoded RGBA bitmaps. The original
pixels are cached once per image and never modified; every recompute grades
a fresh copy.

Features:
- Tone curves (master + red/green/blue) with Catmull-Rom interpolation
- Levels (input/output black and white points, midtone gamma)
- Temperature/tint and color balance shifts
- Numba-compiled per-pixel LUT kernels
- Weak-keyed original buffer cache (copy on read)
- Debounced recomputation with stale-result protection
- Delegated hue/saturation/lightness, sharpen, clarity and vignette filters

Stage order (fixed): Curves -> Levels -> Temperature/Tint -> Color Balance

Example - Session (host integration):
    >>> from pixgrade import GradingSession
    >>>
    >>> session = GradingSession(on_result=host.swap_image)
    >>> session.select(image)
    >>> session.set_curve("master", [(0, 0), (0.5, 0.6), (1, 1)])
    >>> session.set_levels(input_black=12, gamma=1.1)
    >>> session.set_finish(sharpen=20)

Example - Pipeline only:
    >>> from pixgrade import GradingPipeline, GradingState, PixelBuffer
    >>>
    >>> state = GradingState()
    >>> state.temperature_tint.temperature = 100
    >>> graded = GradingPipeline().run(PixelBuffer.from_array(pixels), state).buffer
"""

__version__ = "0.1.0"

from pixgrade.buffer import PixelBuffer
from pixgrade.cache import OriginalBufferCache
from pixgrade.config import (
    CONFIG,
    ColorBalanceValues,
    FinishValues,
    GradingState,
    LevelsValues,
    OperationSpec,
    TemperatureTintValues,
)
from pixgrade.config.presets import (
    GRADING_PRESETS,
    get_preset,
    load_state_json,
    save_state_json,
    state_from_dict,
    state_to_dict,
)
from pixgrade.curves import (
    ChannelCurves,
    CurveEditor,
    CurvePoint,
    CurvesStage,
    ToneCurve,
    compile_lut,
    evaluate,
)
from pixgrade.filters import (
    Brightness,
    Convolute,
    HueRotation,
    ReferenceFilterBackend,
    Saturation,
    Vignette,
    build_filter_list,
)
from pixgrade.handoff import FilterHandoff, PillowBackend, RenderedResult, Transform
from pixgrade.pipeline import GradingPipeline, PipelineResult, grade
from pixgrade.protocols import FilterBackend, PixelStage, RasterBackend, RasterFilter, SourceImage
from pixgrade.scheduler import DebouncedScheduler
from pixgrade.session import GradingSession
from pixgrade.stages import ColorBalanceStage, LevelsStage, TemperatureTintStage

__all__ = [
    "__version__",
    # Data
    "PixelBuffer",
    "OriginalBufferCache",
    # Config / values
    "CONFIG",
    "OperationSpec",
    "GradingState",
    "LevelsValues",
    "TemperatureTintValues",
    "ColorBalanceValues",
    "FinishValues",
    # Presets
    "GRADING_PRESETS",
    "get_preset",
    "state_from_dict",
    "state_to_dict",
    "load_state_json",
    "save_state_json",
    # Curves
    "ToneCurve",
    "CurvePoint",
    "CurveEditor",
    "ChannelCurves",
    "evaluate",
    "compile_lut",
    # Stages / pipeline
    "CurvesStage",
    "LevelsStage",
    "TemperatureTintStage",
    "ColorBalanceStage",
    "GradingPipeline",
    "PipelineResult",
    "grade",
    # Filters / handoff
    "HueRotation",
    "Saturation",
    "Brightness",
    "Convolute",
    "Vignette",
    "build_filter_list",
    "ReferenceFilterBackend",
    "FilterHandoff",
    "PillowBackend",
    "RenderedResult",
    "Transform",
    # Scheduling
    "DebouncedScheduler",
    "GradingSession",
    # Protocols
    "PixelStage",
    "RasterFilter",
    "SourceImage",
    "RasterBackend",
    "FilterBackend",
]
