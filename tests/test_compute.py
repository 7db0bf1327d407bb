"""Tests for the per-frame compute function."""

import dataclasses

import numpy as np
import pytest

from radioscope.compute import compute
from radioscope.core.layer import TEXT_STROKE_WIDTH, layer_width
from radioscope.core.params import ParameterSet


class TestOscillatorMode:
    def test_one_layer_per_wave(self, clean_params):
        layers = compute(clean_params)
        assert [layer.layer_index for layer in layers] == [0, 1, 2]
        assert [layer.stroke_width for layer in layers] == [layer_width(i) for i in range(3)]
        assert not any(layer.echo for layer in layers)

    def test_echo_layers_follow_base(self, clean_params):
        params = dataclasses.replace(clean_params, echo=50)
        layers = compute(params)
        assert [layer.layer_index for layer in layers] == [0, 1, 2, 3, 4, 5]
        assert [layer.echo for layer in layers] == [False] * 3 + [True] * 3

    def test_wave_count_clamped(self, clean_params):
        assert len(compute(dataclasses.replace(clean_params, wave_count=0))) == 1
        assert len(compute(dataclasses.replace(clean_params, wave_count=99))) == 8

    def test_time_argument_overrides_snapshot(self, clean_params):
        a = compute(clean_params, time=2.0)
        b = compute(dataclasses.replace(clean_params, time=2.0))
        np.testing.assert_array_equal(a[0].points, b[0].points)

    def test_canvas_size(self, clean_params):
        layers = compute(clean_params, width=400, height=100)
        assert layers[0].points[-1, 0] == pytest.approx(390)
        assert layers[0].points[0, 1] == pytest.approx(50)

    def test_deterministic(self, clean_params):
        a = compute(clean_params, time=1.5)
        b = compute(clean_params, time=1.5)
        for la, lb in zip(a, b):
            np.testing.assert_array_equal(la.points, lb.points)
            assert la.color == lb.color

    def test_seeded_random_effects(self, clean_params):
        params = dataclasses.replace(clean_params, glitch=70, noise=70, echo=30)
        a = compute(params, rng=np.random.default_rng(11))
        b = compute(params, rng=np.random.default_rng(11))
        for la, lb in zip(a, b):
            np.testing.assert_array_equal(la.points, lb.points)


class TestPowerOff:
    def test_flat_lines_without_echo(self, clean_params):
        params = dataclasses.replace(clean_params, power_on=False, echo=80)
        layers = compute(params)
        assert len(layers) == 3
        for layer in layers:
            np.testing.assert_allclose(layer.points, [[10, 125], [790, 125]])

    def test_text_mode_powered_off(self, clean_params, block_rasterizer):
        params = dataclasses.replace(clean_params, power_on=False, text_mode=True, text_input="HI")
        layers = compute(params, rasterizer=block_rasterizer)
        assert block_rasterizer.calls == []
        np.testing.assert_allclose(layers[0].points, [[10, 125], [790, 125]])


class TestTextMode:
    def test_text_replaces_oscillator(self, clean_params, block_rasterizer):
        params = dataclasses.replace(clean_params, text_mode=True, text_input="HI")
        layers = compute(params, rasterizer=block_rasterizer)
        assert len(layers) == 1
        assert layers[0].stroke_width == TEXT_STROKE_WIDTH
        assert len(layers[0].points) == 80

    def test_text_ghost(self, clean_params, block_rasterizer):
        params = dataclasses.replace(clean_params, text_mode=True, text_input="HI", afterglow=60)
        layers = compute(params, rasterizer=block_rasterizer)
        assert len(layers) == 2
        assert layers[1].echo
        assert layers[1].layer_index == 1

    def test_empty_text_falls_back(self, clean_params, block_rasterizer):
        params = dataclasses.replace(clean_params, text_mode=True, text_input="  ")
        layers = compute(params, rasterizer=block_rasterizer)
        assert len(layers) == 3
        assert block_rasterizer.calls == []

    def test_no_ink_falls_back(self, clean_params, blank_rasterizer):
        params = dataclasses.replace(clean_params, text_mode=True, text_input="HI")
        layers = compute(params, rasterizer=blank_rasterizer)
        assert len(layers) == 3
        assert len(layers[0].points) == 201

    def test_precomputed_contour_skips_rasterizer(self, clean_params, block_rasterizer):
        params = dataclasses.replace(clean_params, text_mode=True, text_input="HI")
        contour = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        layers = compute(params, rasterizer=block_rasterizer, contour=contour)
        assert block_rasterizer.calls == []
        np.testing.assert_array_equal(layers[0].points, contour)

    def test_text_mode_off_ignores_text(self, block_rasterizer):
        layers = compute(ParameterSet(text_input="HI"), rasterizer=block_rasterizer)
        assert block_rasterizer.calls == []
        assert len(layers) == 3
