"""Tests for tone curve evaluation, LUT compilation and point editing."""

import numpy as np
import pytest

from pixgrade import CurveEditor, ToneCurve, compile_lut, evaluate
from pixgrade.curves.editor import hit_test
from pixgrade.curves.spline import identity_lut


class TestEvaluate:
    """Catmull-Rom evaluation."""

    def test_control_points_are_exact(self):
        """A query on a control point returns its y exactly."""
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.8), (1.0, 1.0)])

        assert evaluate(curve, 0.5) == 0.8
        assert evaluate(curve, 0.0) == 0.0
        assert evaluate(curve, 1.0) == 1.0

    def test_no_extrapolation_beyond_endpoints(self):
        curve = ToneCurve([(0.0, 0.2), (0.5, 0.5), (1.0, 0.7)])

        assert evaluate(curve, -0.5) == 0.2
        assert evaluate(curve, 1.5) == 0.7

    def test_scalar_and_array_inputs(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.8), (1.0, 1.0)])

        scalar = evaluate(curve, 0.25)
        array = evaluate(curve, np.array([0.25, 0.75]))

        assert isinstance(scalar, float)
        assert array.shape == (2,)
        assert array[0] == pytest.approx(scalar)

    def test_accepts_point_sequences(self):
        points = [(0.0, 0.0), (0.5, 0.8), (1.0, 1.0)]
        x = np.linspace(0, 1, 11)

        np.testing.assert_allclose(evaluate(points, x), evaluate(ToneCurve(points), x))

    def test_passes_through_interior_midpoint_smoothly(self):
        """Between two points the spline stays between its neighbours for a gentle curve."""
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.6), (1.0, 1.0)])
        y = evaluate(curve, 0.25)

        assert 0.0 < y < 0.6

    def test_output_clamped_for_overshooting_curve(self):
        """Zig-zag points make the spline overshoot; output stays in [0, 1]."""
        curve = ToneCurve([(0.0, 0.0), (0.1, 1.0), (0.2, 0.0), (0.3, 1.0), (1.0, 0.0)])
        y = evaluate(curve, np.linspace(0, 1, 1001))

        assert y.min() >= 0.0
        assert y.max() <= 1.0


class TestCompileLut:
    """LUT compilation."""

    def test_identity_curve_gives_identity_lut(self):
        lut = compile_lut([(0.0, 0.0), (1.0, 1.0)])

        np.testing.assert_array_equal(lut, np.arange(256, dtype=np.uint8))
        assert lut.dtype == np.uint8
        assert lut.shape == (256,)

    def test_identity_lut_is_fresh_copy(self):
        lut = identity_lut()
        lut[0] = 99

        assert identity_lut()[0] == 0

    @pytest.mark.parametrize(
        "points",
        [
            [(0.0, 1.0), (1.0, 0.0)],
            [(0.0, 0.0), (0.05, 1.0), (0.1, 0.0), (1.0, 1.0)],
            [(0.0, 0.5), (0.3, 0.0), (0.31, 1.0), (0.7, 0.0), (1.0, 0.5)],
            [(0.0, 1.0), (0.5, 1.0), (1.0, 1.0)],
        ],
    )
    def test_lut_bounds_for_pathological_curves(self, points):
        lut = compile_lut(points)

        assert lut.dtype == np.uint8
        assert lut.shape == (256,)
        assert int(lut.min()) >= 0
        assert int(lut.max()) <= 255

    def test_inverted_curve(self):
        lut = compile_lut([(0.0, 1.0), (1.0, 0.0)])

        assert lut[0] == 255
        assert lut[255] == 0

    def test_control_point_byte(self):
        lut = compile_lut([(0.0, 0.0), (0.5, 0.8), (1.0, 1.0)])

        assert lut[0] == 0
        assert lut[255] == 255
        # 0.5 falls between bytes 127 and 128; both sit near 0.8 * 255
        assert abs(int(lut[128]) - 204) <= 2

    def test_lazy_compile_and_invalidation(self):
        curve = ToneCurve()
        assert not curve.is_compiled

        lut = curve.lut
        assert curve.is_compiled
        assert curve.lut is lut
        assert not lut.flags.writeable

        curve.insert_point(0.5, 0.7)
        assert not curve.is_compiled
        assert curve.lut is not lut
        assert curve.lut[128] > 128


class TestToneCurvePoints:
    """Point list invariants and editing operations."""

    def test_default_is_identity_pair(self):
        curve = ToneCurve()

        assert curve.points == ((0.0, 0.0), (1.0, 1.0))
        assert curve.is_identity()

    def test_set_points_sorts_clamps_and_pins_endpoints(self):
        curve = ToneCurve([(0.9, 0.7), (0.5, 1.4), (0.1, -0.2)])

        assert curve.points == ((0.0, 0.0), (0.5, 1.0), (1.0, 0.7))

    def test_set_points_drops_colliding_x(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.3), (0.5, 0.6), (1.0, 1.0)])

        assert len(curve) == 3
        xs = [p.x for p in curve]
        assert xs == sorted(set(xs))

    def test_set_points_requires_two(self):
        with pytest.raises(ValueError):
            ToneCurve([(0.5, 0.5)])

    def test_insert_keeps_sorted(self):
        curve = ToneCurve()
        assert curve.insert_point(0.7, 0.8) == 1
        assert curve.insert_point(0.3, 0.2) == 1

        assert [p.x for p in curve] == [0.0, 0.3, 0.7, 1.0]

    @pytest.mark.parametrize("x", [0.0, 0.01, 0.02, 0.98, 0.99, 1.0])
    def test_insert_refused_near_endpoints(self, x):
        curve = ToneCurve()

        assert curve.insert_point(x, 0.5) is None
        assert len(curve) == 2

    def test_insert_refused_on_x_collision(self):
        curve = ToneCurve()
        curve.insert_point(0.5, 0.5)

        assert curve.insert_point(0.505, 0.1) is None
        assert len(curve) == 3

    def test_move_endpoint_only_vertically(self):
        curve = ToneCurve()

        assert curve.move_point(0, 0.4, 0.3) == (0.0, 0.3)
        assert curve.move_point(1, 0.2, 0.6) == (1.0, 0.6)

    def test_move_interior_clamped_between_neighbours(self):
        curve = ToneCurve([(0.0, 0.0), (0.4, 0.4), (0.6, 0.6), (1.0, 1.0)])

        moved = curve.move_point(1, 0.9, 2.0)
        assert moved.x == pytest.approx(0.59)
        assert moved.y == 1.0

        moved = curve.move_point(2, 0.0, -1.0)
        assert moved.x == pytest.approx(0.60)
        assert moved.y == 0.0

        xs = [p.x for p in curve]
        assert all(a < b for a, b in zip(xs, xs[1:]))

    def test_move_between_crowded_neighbours_keeps_order(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.5), (0.505, 0.5), (0.51, 0.5), (1.0, 1.0)])

        moved = curve.move_point(2, 0.3, 0.5)

        assert moved.x == pytest.approx(0.505)
        xs = [p.x for p in curve]
        assert all(a < b for a, b in zip(xs, xs[1:]))

    def test_move_invalid_index(self):
        with pytest.raises(IndexError):
            ToneCurve().move_point(5, 0.5, 0.5)

    def test_remove_only_interior(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.7), (1.0, 1.0)])

        assert not curve.remove_point(0)
        assert not curve.remove_point(2)
        assert curve.remove_point(1)
        assert curve.is_identity()

    def test_reset(self):
        curve = ToneCurve([(0.0, 0.2), (0.5, 0.7), (1.0, 0.9)])
        curve.reset()

        assert curve.is_identity()
        np.testing.assert_array_equal(curve.lut, np.arange(256))

    def test_identity_tolerance(self):
        curve = ToneCurve([(0.0, 0.0), (1.0, 0.9995)])

        assert not curve.is_identity()
        assert curve.is_identity(tolerance=1e-3)

    def test_copy_is_independent(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.7), (1.0, 1.0)])
        clone = curve.copy()
        clone.move_point(1, 0.5, 0.2)

        assert curve != clone
        assert curve[1].y == 0.7


class TestCurveEditor:
    """Pointer gestures of the curve editor."""

    def test_hit_test_threshold(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.5), (1.0, 1.0)])

        assert hit_test(curve, 0.52, 0.47) == 1
        assert hit_test(curve, 0.58, 0.5) is None
        assert hit_test(curve, 0.03, 0.03) == 0

    def test_press_inserts_and_drags(self):
        changes = []
        curve = ToneCurve()
        editor = CurveEditor(curve, on_change=lambda: changes.append(1))

        assert editor.press(0.5, 0.7) == 1
        editor.drag(0.55, 0.75)
        editor.release()

        assert curve[1] == pytest.approx((0.55, 0.75))
        assert editor.dragging_index is None
        assert len(changes) == 2

    def test_press_on_existing_point_does_not_insert(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.5), (1.0, 1.0)])
        editor = CurveEditor(curve)

        assert editor.press(0.52, 0.53) == 1
        assert len(curve) == 3

    def test_drag_endpoint(self):
        curve = ToneCurve()
        editor = CurveEditor(curve)

        assert editor.press(0.0, 0.01) == 0
        editor.drag(0.4, 0.3)

        assert curve[0] == (0.0, 0.3)

    def test_press_in_margin_does_nothing(self):
        curve = ToneCurve()
        editor = CurveEditor(curve)

        assert editor.press(0.01, 0.5) is None
        assert editor.dragging_index is None
        assert len(curve) == 2

    def test_coordinates_are_clamped(self):
        curve = ToneCurve()
        editor = CurveEditor(curve)

        assert editor.press(1.5, -0.2) is None
        assert len(curve) == 2

    def test_hover_without_drag(self):
        curve = ToneCurve()
        editor = CurveEditor(curve)

        editor.drag(0.01, 0.02)
        assert editor.hovered_index == 0
        assert curve.is_identity()

        editor.drag(0.5, 0.1)
        assert editor.hovered_index is None

    def test_double_click_removes_interior_only(self):
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.7), (1.0, 1.0)])
        editor = CurveEditor(curve)

        assert not editor.double_click(0.0, 0.0)
        assert not editor.double_click(0.3, 0.1)
        assert editor.double_click(0.51, 0.69)
        assert curve.is_identity()

    def test_reset_notifies(self):
        changes = []
        curve = ToneCurve([(0.0, 0.0), (0.5, 0.7), (1.0, 1.0)])
        editor = CurveEditor(curve, on_change=lambda: changes.append(1))

        editor.reset()

        assert curve.is_identity()
        assert changes == [1]
