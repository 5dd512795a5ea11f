"""Tone curve model, Catmull-Rom evaluation and LUT compilation.

A tone curve is a sorted list of normalized control points. Evaluation uses a
uniform Catmull-Rom spline through the four points around the segment that
contains ``x``; at the ends of the curve the nearest point is duplicated to
stand in for the missing neighbour.

Example:
    >>> curve = ToneCurve([(0.0, 0.0), (0.5, 0.8), (1.0, 1.0)])
    >>> evaluate(curve, 0.5)
    0.8
    >>> lut = curve.lut  # compiled lazily, cached until the curve changes
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import NamedTuple

import numpy as np

from pixgrade.config import EDITOR_CONFIG

logger = logging.getLogger(__name__)

LUT_SIZE = 256

_IDENTITY_LUT = np.arange(LUT_SIZE, dtype=np.uint8)
_IDENTITY_LUT.flags.writeable = False


class CurvePoint(NamedTuple):
    """Normalized control point, both coordinates in [0, 1]."""

    x: float
    y: float


IDENTITY_POINTS: tuple[CurvePoint, CurvePoint] = (CurvePoint(0.0, 0.0), CurvePoint(1.0, 1.0))


def identity_lut() -> np.ndarray:
    """Return a fresh identity LUT (``lut[i] == i``)."""
    return _IDENTITY_LUT.copy()


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class ToneCurve:
    """Ordered control points of one tone curve with a lazily compiled LUT.

    The point list always starts at ``x = 0`` and ends at ``x = 1`` with
    strictly increasing ``x`` in between. Mutations mark the LUT dirty; it is
    recompiled on the next access of :attr:`lut`.
    """

    __slots__ = ("_points", "_compiled_lut", "_is_dirty")

    def __init__(self, points: Iterable[Sequence[float]] | None = None):
        self._points: list[CurvePoint] = []
        self._compiled_lut: np.ndarray | None = None
        self._is_dirty = True
        self.set_points(IDENTITY_POINTS if points is None else points)

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def points(self) -> tuple[CurvePoint, ...]:
        """Control points, sorted by x."""
        return tuple(self._points)

    @property
    def is_compiled(self) -> bool:
        """Check if LUT is compiled and up-to-date."""
        return self._compiled_lut is not None and not self._is_dirty

    @property
    def lut(self) -> np.ndarray:
        """Compiled 256-entry LUT (read-only view, recompiled when dirty)."""
        if not self.is_compiled:
            self.compile()
        return self._compiled_lut

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> CurvePoint:
        return self._points[index]

    def __iter__(self):
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ToneCurve):
            return NotImplemented
        return self._points == other._points

    def __repr__(self) -> str:
        pts = ", ".join(f"({p.x:.3f}, {p.y:.3f})" for p in self._points)
        return f"ToneCurve([{pts}])"

    # ========================================================================
    # Mutation
    # ========================================================================

    def set_points(self, points: Iterable[Sequence[float]]) -> None:
        """Replace all control points.

        Points are clamped to [0, 1], sorted by x, and the endpoints are
        pinned to x=0 and x=1. Points sharing an x with an earlier point are
        dropped so the x coordinates stay strictly increasing.

        :param points: Iterable of (x, y) pairs, at least two
        :raises ValueError: If fewer than two points are given
        """
        cleaned = sorted(
            (CurvePoint(_clamp01(x), _clamp01(y)) for x, y in points), key=lambda p: p.x
        )
        if len(cleaned) < 2:
            raise ValueError(f"A tone curve needs at least 2 points, got {len(cleaned)}")

        cleaned[0] = CurvePoint(0.0, cleaned[0].y)
        cleaned[-1] = CurvePoint(1.0, cleaned[-1].y)

        unique = [cleaned[0]]
        for point in cleaned[1:-1]:
            if point.x > unique[-1].x:
                unique.append(point)
        if unique[-1].x >= 1.0:
            unique.pop()
        unique.append(cleaned[-1])

        self._points = unique
        self._is_dirty = True

    def insert_point(self, x: float, y: float) -> int | None:
        """Insert a control point, keeping the list sorted.

        Insertion is refused inside the endpoint margins and when the new x
        would collide with an existing point.

        :param x: Normalized input value
        :param y: Normalized output value
        :returns: Index of the new point, or None if nothing was inserted
        """
        x, y = _clamp01(x), _clamp01(y)
        margin = EDITOR_CONFIG.insert_margin
        if not margin < x < 1.0 - margin:
            return None
        if any(abs(p.x - x) < EDITOR_CONFIG.drag_epsilon for p in self._points):
            return None

        index = int(np.searchsorted([p.x for p in self._points], x))
        self._points.insert(index, CurvePoint(x, y))
        self._is_dirty = True
        return index

    def move_point(self, index: int, x: float, y: float) -> CurvePoint:
        """Move a control point within its allowed region.

        Endpoints keep their x (0 or 1) and only move vertically. Interior
        points are clamped between their neighbours, leaving a gap of
        ``drag_epsilon`` on each side. When the neighbours are too close for
        that gap, the point sits at their midpoint.

        :param index: Index of the point to move
        :param x: Requested normalized x
        :param y: Requested normalized y
        :returns: The point as stored after clamping
        """
        last = len(self._points) - 1
        if not 0 <= index <= last:
            raise IndexError(f"Point index {index} out of range [0, {last}]")

        y = _clamp01(y)
        if index == 0:
            new_x = 0.0
        elif index == last:
            new_x = 1.0
        else:
            eps = EDITOR_CONFIG.drag_epsilon
            prev_x = self._points[index - 1].x
            next_x = self._points[index + 1].x
            low, high = prev_x + eps, next_x - eps
            if low > high:
                # Neighbours closer than two epsilons: only the midpoint keeps order
                new_x = (prev_x + next_x) / 2.0
            else:
                new_x = max(low, min(high, _clamp01(x)))

        point = CurvePoint(new_x, y)
        self._points[index] = point
        self._is_dirty = True
        return point

    def remove_point(self, index: int) -> bool:
        """Remove an interior control point.

        :param index: Index of the point to remove
        :returns: True if removed, False for endpoints or invalid indices
        """
        if not 0 < index < len(self._points) - 1:
            return False
        del self._points[index]
        self._is_dirty = True
        return True

    def reset(self) -> None:
        """Restore the default identity pair."""
        self._points = list(IDENTITY_POINTS)
        self._is_dirty = True

    # ========================================================================
    # Queries
    # ========================================================================

    def is_identity(self, tolerance: float = 0.0) -> bool:
        """Check whether this is the default two-point identity curve.

        This is a check on the control points, not on the LUT contents.

        :param tolerance: Allowed deviation per coordinate (0.0 = exact)
        """
        if len(self._points) != 2:
            return False
        (x0, y0), (x1, y1) = self._points
        return (
            abs(x0) <= tolerance
            and abs(y0) <= tolerance
            and abs(x1 - 1.0) <= tolerance
            and abs(y1 - 1.0) <= tolerance
        )

    def evaluate(self, x: float | np.ndarray) -> float | np.ndarray:
        """Evaluate the curve at ``x``; see :func:`evaluate`."""
        return evaluate(self, x)

    def compile(self) -> np.ndarray:
        """Compile the LUT now.

        :returns: Compiled LUT [256] uint8 (read-only)
        """
        lut = compile_lut(self)
        lut.flags.writeable = False
        self._compiled_lut = lut
        self._is_dirty = False
        logger.debug("[ToneCurve] Compiled LUT from %d points", len(self._points))
        return lut

    def copy(self) -> ToneCurve:
        return ToneCurve(self._points)

    def to_list(self) -> list[list[float]]:
        return [[p.x, p.y] for p in self._points]


def _as_arrays(curve: ToneCurve | Sequence[Sequence[float]]) -> tuple[np.ndarray, np.ndarray]:
    points = curve.points if isinstance(curve, ToneCurve) else curve
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return arr[:, 0], arr[:, 1]


def evaluate(
    curve: ToneCurve | Sequence[Sequence[float]], x: float | np.ndarray
) -> float | np.ndarray:
    """Evaluate a tone curve with Catmull-Rom interpolation.

    Values at or beyond the first/last control point return that endpoint's
    y (no extrapolation). A value equal to a control point's x returns that
    point's y exactly. Output is clamped to [0, 1].

    :param curve: ToneCurve or sorted sequence of (x, y) pairs
    :param x: Scalar or array of normalized inputs
    :returns: Scalar float for scalar input, float64 array otherwise
    """
    xs, ys = _as_arrays(curve)
    n = len(xs)
    scalar = np.ndim(x) == 0
    xq = np.atleast_1d(np.asarray(x, dtype=np.float64))

    if n < 2:
        out = xq.copy()
        return float(out[0]) if scalar else out

    # Segment start: last point with x strictly below the query
    i = np.clip(np.searchsorted(xs, xq, side="left") - 1, 0, n - 2)
    i0 = np.maximum(i - 1, 0)
    i2 = np.minimum(i + 1, n - 1)
    i3 = np.minimum(i + 2, n - 1)

    y0, y1, y2, y3 = ys[i0], ys[i], ys[i2], ys[i3]
    width = xs[i2] - xs[i]
    safe_width = np.where(width > 0.0, width, 1.0)
    t = (xq - xs[i]) / safe_width
    t2 = t * t
    t3 = t2 * t

    v = 0.5 * (
        2.0 * y1
        + (-y0 + y2) * t
        + (2.0 * y0 - 5.0 * y1 + 4.0 * y2 - y3) * t2
        + (-y0 + 3.0 * y1 - 3.0 * y2 + y3) * t3
    )

    v = np.where(width > 0.0, v, y1)
    v = np.where(xq == xs[i2], y2, v)
    v = np.where(xq <= xs[0], ys[0], v)
    v = np.where(xq >= xs[-1], ys[-1], v)
    v = np.clip(v, 0.0, 1.0)

    return float(v[0]) if scalar else v


def compile_lut(curve: ToneCurve | Sequence[Sequence[float]]) -> np.ndarray:
    """Compile a 256-entry lookup table from a tone curve.

    The exact two-point identity curve short-circuits to ``lut[i] == i``
    without sampling the spline.

    :param curve: ToneCurve or sorted sequence of (x, y) pairs
    :returns: LUT [256] uint8
    """
    if not isinstance(curve, ToneCurve):
        curve = ToneCurve(curve)
    if curve.is_identity():
        return identity_lut()

    x = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
    y = evaluate(curve, x)
    # Round half up, matching byte rounding of the editor preview
    lut = np.floor(y * 255.0 + 0.5)
    return np.clip(lut, 0, 255).astype(np.uint8)
