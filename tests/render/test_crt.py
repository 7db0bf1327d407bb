"""Tests for CRT post-processing."""

import numpy as np
import pytest

from radioscope.render.colorgrade import add_glow, phosphor_decay, scanlines, vignette


@pytest.fixture
def bright_dot():
    frame = np.zeros((40, 40, 3), dtype=np.uint8)
    frame[18:22, 18:22] = 220
    return frame


class TestGlow:
    def test_spreads_light(self, bright_dot):
        out = add_glow(bright_dot, intensity=0.8, radius=4)
        assert out[15, 20].sum() > 0
        assert out.shape == bright_dot.shape and out.dtype == np.uint8

    def test_never_darkens(self, bright_dot):
        out = add_glow(bright_dot, intensity=0.5, radius=3)
        assert np.all(out >= bright_dot)

    def test_zero_intensity_passthrough(self, bright_dot):
        assert add_glow(bright_dot, intensity=0) is bright_dot


class TestPhosphorDecay:
    def test_first_frame_passthrough(self, bright_dot):
        assert phosphor_decay(bright_dot, None) is bright_dot

    def test_trail_persists(self, bright_dot):
        blank = np.zeros_like(bright_dot)
        out = phosphor_decay(blank, bright_dot, persistence=0.6)
        assert 0 < out[20, 20, 0] < 220

    def test_new_frame_wins(self, bright_dot):
        dim = bright_dot // 4
        out = phosphor_decay(bright_dot, dim, persistence=0.9)
        assert np.all(out >= bright_dot)

    def test_shape_mismatch_ignored(self, bright_dot):
        assert phosphor_decay(bright_dot, np.zeros((5, 5, 3), dtype=np.uint8)) is bright_dot


class TestScanlines:
    def test_darkens_every_third_row(self):
        frame = np.full((9, 4, 3), 200, dtype=np.uint8)
        out = scanlines(frame, strength=0.5)
        assert out[0, 0, 0] == 100
        assert out[1, 0, 0] == 200
        assert out[3, 0, 0] == 100

    def test_zero_strength(self):
        frame = np.full((9, 4, 3), 200, dtype=np.uint8)
        assert scanlines(frame, strength=0) is frame


class TestVignette:
    def test_center_brighter_than_corner(self):
        frame = np.full((50, 50, 3), 200, dtype=np.uint8)
        out = vignette(frame, strength=0.8)
        assert out[25, 25, 0] > out[0, 0, 0]

    def test_zero_strength(self):
        frame = np.full((10, 10, 3), 200, dtype=np.uint8)
        assert vignette(frame, strength=0) is frame
