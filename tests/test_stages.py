"""Tests for the levels, temperature/tint and color balance stages."""

import numpy as np
import pytest

from pixgrade import (
    ColorBalanceStage,
    ColorBalanceValues,
    GradingState,
    LevelsStage,
    LevelsValues,
    PixelBuffer,
    TemperatureTintStage,
    TemperatureTintValues,
)
from pixgrade.stages import compile_levels_lut
from pixgrade.stages.kernels import offset_lut, warmup_kernels


def _solid(r, g, b, a=255):
    return PixelBuffer.blank(2, 2, fill=(r, g, b, a))


class TestKernels:
    def test_warmup(self):
        warmup_kernels()

    def test_offset_lut_clamps(self):
        lut = offset_lut(30.0)

        assert lut[0] == 30
        assert lut[225] == 255
        assert lut[255] == 255

        lut = offset_lut(-30.0)
        assert lut[10] == 0
        assert lut[255] == 225


class TestLevels:
    """Levels LUT and stage."""

    def test_neutral_lut_is_identity(self):
        lut = compile_levels_lut(LevelsValues())

        np.testing.assert_array_equal(lut, np.arange(256, dtype=np.uint8))

    def test_neutral_stage_is_byte_identical(self, sample_buffer):
        state = GradingState()
        before = sample_buffer.copy()
        stage = LevelsStage()

        assert stage.is_neutral(state)
        stage.apply(sample_buffer, state)

        assert sample_buffer == before

    def test_input_points(self):
        lut = compile_levels_lut(LevelsValues(input_black=20, input_white=235))

        assert lut[0] == 0
        assert lut[20] == 0
        assert lut[235] == 255
        assert lut[255] == 255
        assert abs(int(lut[127]) - 127) <= 1

    def test_output_points(self):
        lut = compile_levels_lut(LevelsValues(output_black=30, output_white=220))

        assert lut[0] == 30
        assert lut[255] == 220

    def test_gamma_brightens_midtones(self):
        brighter = compile_levels_lut(LevelsValues(gamma=2.0))
        darker = compile_levels_lut(LevelsValues(gamma=0.5))

        assert brighter[128] > 128
        assert darker[128] < 128
        assert brighter[0] == 0 and brighter[255] == 255

    @pytest.mark.parametrize(
        "params",
        [
            {"gamma": 0.0},
            {"gamma": -3.0},
            {"gamma": 500.0},
            {"input_black": 250, "input_white": 10},
            {"input_black": 128, "input_white": 128},
            {"output_black": 255, "output_white": 0},
            {"output_black": -80, "output_white": 400},
            {"input_black": -10, "input_white": 900, "gamma": 0.01},
        ],
    )
    def test_extremes_stay_in_range(self, params):
        values = LevelsValues(**params)
        lut = compile_levels_lut(values)
        clamped = values.clamp()
        low = min(clamped.output_black, clamped.output_white)
        high = max(clamped.output_black, clamped.output_white)

        assert lut.dtype == np.uint8
        assert int(lut.min()) >= low
        assert int(lut.max()) <= high

    def test_stage_applies_lut_to_rgb_only(self, ramp_buffer):
        state = GradingState(levels=LevelsValues(input_black=20, input_white=235))
        stage = LevelsStage()

        assert not stage.is_neutral(state)
        stage.apply(ramp_buffer, state)

        lut = compile_levels_lut(state.levels)
        np.testing.assert_array_equal(ramp_buffer.data[0, :, 0], lut)
        assert (ramp_buffer.alpha == 255).all()


class TestTemperatureTint:
    """Temperature/tint stage."""

    def test_warm_shift(self):
        buffer = _solid(100, 100, 100)
        state = GradingState(temperature_tint=TemperatureTintValues(temperature=100))

        TemperatureTintStage().apply(buffer, state)

        assert tuple(buffer.data[0, 0, :3]) == (130, 100, 70)

    def test_tint_shift(self):
        buffer = _solid(100, 100, 100)
        state = GradingState(temperature_tint=TemperatureTintValues(tint=-100))

        TemperatureTintStage().apply(buffer, state)

        assert tuple(buffer.data[0, 0, :3]) == (100, 80, 100)

    def test_channels_clamp_independently(self):
        buffer = _solid(250, 5, 10, 77)
        state = GradingState(temperature_tint=TemperatureTintValues(temperature=100, tint=-100))

        TemperatureTintStage().apply(buffer, state)

        assert tuple(buffer.data[0, 0]) == (255, 0, 0, 77)

    def test_out_of_range_parameters_clamped(self):
        buffer = _solid(100, 100, 100)
        state = GradingState(temperature_tint=TemperatureTintValues(temperature=400))

        TemperatureTintStage().apply(buffer, state)

        assert tuple(buffer.data[0, 0, :3]) == (130, 100, 70)

    def test_skipped_at_zero(self):
        assert TemperatureTintStage().is_neutral(GradingState())


class TestColorBalance:
    """Color balance stage."""

    def test_zero_case_is_skipped_and_identical(self, sample_buffer):
        state = GradingState()
        before = sample_buffer.copy()
        stage = ColorBalanceStage()

        assert stage.is_neutral(state)
        stage.apply(sample_buffer, state)

        assert sample_buffer == before

    def test_axis_shifts_average_ranges(self):
        balance = ColorBalanceValues(
            midtones_cyan_red=30,
            shadows_yellow_blue=-60,
            highlights_yellow_blue=-30,
        )

        assert balance.axis_shifts() == pytest.approx((10.0, 0.0, -30.0))

    def test_flat_shift(self):
        balance = ColorBalanceValues(
            midtones_cyan_red=30,
            shadows_yellow_blue=-60,
            highlights_yellow_blue=-30,
        )
        state = GradingState(color_balance=balance)
        dark = _solid(100, 100, 100)
        bright = _solid(240, 240, 240)

        ColorBalanceStage().apply(dark, state)
        ColorBalanceStage().apply(bright, state)

        # Same shift regardless of luminance
        assert tuple(dark.data[0, 0, :3]) == (105, 100, 85)
        assert tuple(bright.data[0, 0, :3]) == (245, 240, 225)

    def test_single_slider_breaks_neutral(self):
        state = GradingState()
        state.color_balance.set("highlights", "magenta_green", 1)

        assert not ColorBalanceStage().is_neutral(state)
