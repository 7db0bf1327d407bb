"""Tests for the animation driver."""

import math

import numpy as np
import pytest

from radioscope.core.params import ParameterSet
from radioscope.render.raster import DisplayConfig, FrameRenderer
from radioscope.simulator import TIME_PERIOD, SimulatorConfig, WaveSimulator, advance_time


@pytest.fixture
def small_config():
    return SimulatorConfig(width=160, height=60)


class TestClock:
    def test_advance_time(self):
        assert advance_time(0.0, 1.0) == pytest.approx(0.1)
        assert advance_time(0.0, 2.5) == pytest.approx(0.25)

    def test_wraps(self):
        assert advance_time(TIME_PERIOD - 0.05, 1.0) == pytest.approx(0.05)

    def test_period_is_whole_cycles(self):
        assert (TIME_PERIOD / (2 * math.pi)) == pytest.approx(round(TIME_PERIOD / (2 * math.pi)))

    def test_advance_only_when_powered(self, small_config):
        sim = WaveSimulator(ParameterSet(speed=2.0), small_config)
        sim.advance()
        assert sim.time == pytest.approx(0.2)

        sim.update(power_on=False)
        sim.advance()
        assert sim.time == pytest.approx(0.2)

    def test_time_kept_across_param_changes(self, small_config):
        sim = WaveSimulator(ParameterSet(), small_config)
        for _ in range(5):
            sim.advance()
        sim.update(amplitude=90)
        assert sim.time == pytest.approx(0.5)
        assert sim.params.amplitude == 90


class TestLayers:
    def test_params_clamped_on_set(self, small_config):
        sim = WaveSimulator(ParameterSet(wave_count=40), small_config)
        assert sim.params.wave_count == 8

    def test_layers_use_canvas(self, small_config):
        sim = WaveSimulator(ParameterSet(wave_count=2), small_config)
        layers = sim.layers()
        assert len(layers) == 2
        assert layers[0].points[-1, 0] == pytest.approx(150)

    def test_seed_reproducible(self, small_config):
        params = ParameterSet(glitch=50, noise=50)
        a = WaveSimulator(params, small_config, seed=3).layers()
        b = WaveSimulator(params, small_config, seed=3).layers()
        np.testing.assert_array_equal(a[0].points, b[0].points)


class TestContourCache:
    def test_contour_traced_once(self, small_config, block_rasterizer):
        sim = WaveSimulator(
            ParameterSet(text_mode=True, text_input="HI"), small_config, rasterizer=block_rasterizer
        )
        for _ in range(4):
            sim.layers()
            sim.advance()
        assert sim.rasterizations == 1
        assert len(block_rasterizer.calls) == 1

    def test_contour_retraced_on_change(self, small_config, block_rasterizer):
        sim = WaveSimulator(
            ParameterSet(text_mode=True, text_input="HI"), small_config, rasterizer=block_rasterizer
        )
        sim.layers()
        sim.update(text_input="HEY")
        sim.layers()
        sim.update(amplitude=120, modulation=0.8, color_mode="rainbow")
        sim.layers()
        assert sim.rasterizations == 2

    def test_contour_effects_follow_clock(self, small_config, block_rasterizer):
        sim = WaveSimulator(
            ParameterSet(text_mode=True, text_input="HI", modulation=1.0),
            small_config,
            rasterizer=block_rasterizer,
        )
        first = sim.layers()[0].points
        sim.advance()
        second = sim.layers()[0].points
        assert first.shape == second.shape
        assert not np.allclose(first, second)
        assert sim.rasterizations == 1

    def test_static_contour_matches_outline(self, small_config, block_rasterizer):
        sim = WaveSimulator(
            ParameterSet(text_mode=True, text_input="HI"), small_config, rasterizer=block_rasterizer
        )
        np.testing.assert_array_equal(sim.layers()[0].points, sim.outline())

    def test_oscillator_mode_never_rasterizes(self, small_config, block_rasterizer):
        sim = WaveSimulator(ParameterSet(text_input="HI"), small_config, rasterizer=block_rasterizer)
        sim.layers()
        assert sim.rasterizations == 0


class TestRenderFrames:
    def test_frame_shape_and_count(self, small_config):
        sim = WaveSimulator(ParameterSet(), small_config)
        frames = list(sim.render_frames(3))
        assert len(frames) == 3
        assert frames[0].shape == (60, 160, 3)
        assert frames[0].dtype == np.uint8

    def test_clock_advances_per_frame(self, small_config):
        sim = WaveSimulator(ParameterSet(), small_config)
        list(sim.render_frames(4))
        assert sim.time == pytest.approx(0.4)

    def test_progress_callback(self, small_config):
        sim = WaveSimulator(ParameterSet(), small_config)
        progress = []
        renderer = FrameRenderer(DisplayConfig(width=160, height=60))
        list(sim.render_frames(3, renderer, progress_callback=lambda c, t: progress.append((c, t))))
        assert progress == [(1, 3), (2, 3), (3, 3)]


class TestDisplayTheme:
    def test_default_is_green(self, small_config):
        sim = WaveSimulator(ParameterSet(), small_config)
        assert sim.display_theme == "green"
        assert sim.layers()[0].color.hue == 120

    def test_follows_hue(self, small_config):
        sim = WaveSimulator(ParameterSet(hue=210), small_config)
        assert sim.display_theme == "blue"
        assert sim.layers()[0].color.hue == 210

    def test_unmapped_hue_keeps_previous(self, small_config):
        sim = WaveSimulator(ParameterSet(hue=20), small_config)
        sim.update(hue=300)
        assert sim.display_theme == "amber"
        assert sim.layers()[0].color.hue == 35

    def test_explicit_theme_wins(self, small_config):
        sim = WaveSimulator(ParameterSet(hue=210), small_config)
        sim.update(theme="purple")
        assert sim.display_theme == "purple"
        assert sim.layers()[0].color.hue == 270
