"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from radioscope.core.params import ParameterSet


class BlockRasterizer:
    """
    Stand-in glyph rasterizer drawing one solid block per character.

    Blocks are 20px wide with 10px gaps, centered horizontally, spanning
    the middle fifth of the rows (100-149 on a 250px canvas). Records
    every call for cache assertions.
    """

    def __init__(self, empty: bool = False):
        self.empty = empty
        self.calls = []

    def rasterize(self, text, width, height, font_size):
        self.calls.append((text, width, height, font_size))
        alpha = np.zeros((height, width), dtype=np.uint8)
        if self.empty:
            return alpha
        total = len(text) * 30 - 10
        left = (width - total) // 2
        top, bottom = height * 2 // 5, height * 3 // 5
        for i, ch in enumerate(text):
            if ch.isspace():
                continue
            x0 = left + i * 30
            alpha[top:bottom, x0:x0 + 20] = 255
        return alpha


@pytest.fixture
def clean_params() -> ParameterSet:
    """Default parameters with every effect disabled."""
    return ParameterSet(
        amplitude=50,
        frequency=1,
        phase=0,
        wave_count=3,
        waveform=0,
        time=0,
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def block_rasterizer() -> BlockRasterizer:
    return BlockRasterizer()


@pytest.fixture
def blank_rasterizer() -> BlockRasterizer:
    return BlockRasterizer(empty=True)
