"""Tests for the multi-channel curve compositor."""

import numpy as np
import pytest

from pixgrade import ChannelCurves, CurvesStage, GradingState, PixelBuffer, ToneCurve, compile_lut


class TestChannelCurves:
    """ChannelCurves container."""

    def test_default_is_identity(self):
        assert ChannelCurves().is_identity()

    def test_rgb_alias_is_master(self):
        curves = ChannelCurves()

        assert curves["rgb"] is curves.master

    def test_unknown_channel(self):
        with pytest.raises(KeyError):
            ChannelCurves()["alpha"]

    def test_single_channel_breaks_identity(self):
        curves = ChannelCurves()
        curves.blue.insert_point(0.5, 0.4)

        assert not curves.is_identity()

    def test_compile_order(self):
        curves = ChannelCurves(red=ToneCurve([(0.0, 1.0), (1.0, 0.0)]))
        luts = curves.compile()

        assert luts.shape == (4, 256)
        assert luts[0, 0] == 255
        np.testing.assert_array_equal(luts[3], np.arange(256))

    def test_channel_applied_before_master(self):
        """Red curve lifts shadows, master crushes them; the order decides the result."""
        red = ToneCurve([(0.0, 0.5), (1.0, 1.0)])
        master = ToneCurve([(0.0, 0.0), (0.5, 0.0), (1.0, 1.0)])
        curves = ChannelCurves(master=master, red=red)

        r, g, b = curves.apply_pixel(0, 0, 0)

        red_lut = compile_lut(red)
        master_lut = compile_lut(master)
        assert r == master_lut[red_lut[0]]
        assert r != red_lut[master_lut[0]]
        assert (g, b) == (0, 0)

    def test_reset_single_channel(self):
        curves = ChannelCurves()
        curves.red.insert_point(0.5, 0.8)
        curves.master.insert_point(0.5, 0.2)

        curves.reset("red")
        assert curves.red.is_identity()
        assert not curves.master.is_identity()

        curves.reset()
        assert curves.is_identity()

    def test_dict_round_trip(self):
        curves = ChannelCurves()
        curves.green.insert_point(0.25, 0.4)

        restored = ChannelCurves.from_dict(curves.to_dict())

        assert restored.green == curves.green
        assert restored.master.is_identity()

    def test_from_dict_rejects_unknown_channel(self):
        with pytest.raises(ValueError):
            ChannelCurves.from_dict({"alpha": [[0, 0], [1, 1]]})


class TestCurvesStage:
    """CurvesStage on buffers."""

    def test_neutral_when_identity(self):
        assert CurvesStage().is_neutral(GradingState())

    def test_apply_matches_per_pixel_composition(self, sample_buffer):
        state = GradingState()
        state.curves.red.set_points([(0.0, 0.1), (0.5, 0.7), (1.0, 0.9)])
        state.curves.master.set_points([(0.0, 0.0), (0.3, 0.2), (1.0, 1.0)])
        original = sample_buffer.copy()

        CurvesStage().apply(sample_buffer, state)

        master = state.curves.master.lut
        red = state.curves.red.lut
        expected_r = master[red[original.data[..., 0]]]
        expected_g = master[original.data[..., 1]]
        np.testing.assert_array_equal(sample_buffer.data[..., 0], expected_r)
        np.testing.assert_array_equal(sample_buffer.data[..., 1], expected_g)

    def test_alpha_untouched(self, sample_buffer):
        state = GradingState()
        state.curves.master.set_points([(0.0, 1.0), (1.0, 0.0)])
        alpha = sample_buffer.alpha.copy()

        CurvesStage().apply(sample_buffer, state)

        np.testing.assert_array_equal(sample_buffer.alpha, alpha)

    def test_identity_apply_is_noop(self):
        buffer = PixelBuffer.blank(3, 3, fill=(10, 200, 77, 128))
        before = buffer.copy()

        CurvesStage().apply(buffer, GradingState())

        assert buffer == before
