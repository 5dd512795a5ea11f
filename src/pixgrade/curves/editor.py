"""Pointer gesture logic of the interactive curve editor.

The host UI converts pointer events into normalized graph coordinates
(``x`` right, ``y`` up, both in [0, 1]) and forwards them here; drawing and
event plumbing stay on the host side.

Gestures:
    - press on empty space: insert a point (away from the endpoints) and
      start dragging it
    - press on a point: start dragging it
    - drag: move the active point (endpoints only vertically)
    - double activation on an interior point: remove it

Example:
    >>> curve = ToneCurve()
    >>> editor = CurveEditor(curve)
    >>> editor.press(0.5, 0.7)      # inserts (0.5, 0.7) and grabs it
    1
    >>> editor.drag(0.55, 0.75)
    >>> editor.release()
"""

from __future__ import annotations

from collections.abc import Callable

from pixgrade.config import EDITOR_CONFIG
from pixgrade.curves.spline import ToneCurve


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def hit_test(
    curve: ToneCurve, x: float, y: float, threshold: float = EDITOR_CONFIG.hit_threshold
) -> int | None:
    """Find the control point under a normalized position.

    A point is hit when both coordinates are within ``threshold``; the first
    matching point wins.

    :param curve: Curve to search
    :param x: Normalized x
    :param y: Normalized y
    :param threshold: Hit box half-size in normalized units
    :returns: Index of the hit point or None
    """
    for index, point in enumerate(curve.points):
        if abs(point.x - x) < threshold and abs(point.y - y) < threshold:
            return index
    return None


class CurveEditor:
    """Stateful gesture handler for one tone curve.

    :param curve: The curve being edited (mutated in place)
    :param on_change: Called after every mutation, typically to schedule a
        recompute
    :param threshold: Hit-test threshold in normalized units
    """

    def __init__(
        self,
        curve: ToneCurve,
        on_change: Callable[[], None] | None = None,
        threshold: float = EDITOR_CONFIG.hit_threshold,
    ):
        self.curve = curve
        self.on_change = on_change
        self.threshold = threshold
        self.dragging_index: int | None = None
        self.hovered_index: int | None = None

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def press(self, x: float, y: float) -> int | None:
        """Handle a press: grab an existing point or insert a new one.

        :returns: Index of the point now being dragged, or None
        """
        x, y = _clamp01(x), _clamp01(y)
        index = hit_test(self.curve, x, y, self.threshold)
        if index is None:
            index = self.curve.insert_point(x, y)
            if index is not None:
                self._changed()
        self.dragging_index = index
        return index

    def drag(self, x: float, y: float) -> None:
        """Handle pointer motion.

        Moves the active point if a drag is in progress, otherwise only
        updates :attr:`hovered_index`.
        """
        x, y = _clamp01(x), _clamp01(y)
        if self.dragging_index is None:
            self.hovered_index = hit_test(self.curve, x, y, self.threshold)
            return
        self.curve.move_point(self.dragging_index, x, y)
        self._changed()

    def release(self) -> None:
        """End the current drag, if any."""
        self.dragging_index = None

    def double_click(self, x: float, y: float) -> bool:
        """Remove the interior point under the pointer.

        :returns: True if a point was removed
        """
        x, y = _clamp01(x), _clamp01(y)
        index = hit_test(self.curve, x, y, self.threshold)
        if index is None or not self.curve.remove_point(index):
            return False
        self.hovered_index = None
        self.dragging_index = None
        self._changed()
        return True

    def reset(self) -> None:
        """Reset the curve to identity."""
        self.curve.reset()
        self.dragging_index = None
        self.hovered_index = None
        self._changed()
