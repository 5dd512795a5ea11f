"""
Tone curves - control points, Catmull-Rom evaluation, LUT compilation and the
four-channel compositor.

Example:
    >>> from pixgrade.curves import ToneCurve, compile_lut
    >>> lut = compile_lut(ToneCurve([(0, 0), (0.25, 0.35), (1, 1)]))
"""

from pixgrade.curves.compositor import ChannelCurves, CurvesStage
from pixgrade.curves.editor import CurveEditor, hit_test
from pixgrade.curves.spline import (
    IDENTITY_POINTS,
    LUT_SIZE,
    CurvePoint,
    ToneCurve,
    compile_lut,
    evaluate,
    identity_lut,
)

__all__ = [
    "ChannelCurves",
    "CurvesStage",
    "CurveEditor",
    "hit_test",
    "IDENTITY_POINTS",
    "LUT_SIZE",
    "CurvePoint",
    "ToneCurve",
    "compile_lut",
    "evaluate",
    "identity_lut",
]
