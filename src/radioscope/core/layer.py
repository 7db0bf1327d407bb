"""
Derived per-layer quantities and the output record handed to renderers.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from radioscope.core.color import StrokeColor

BASE_STROKE_WIDTH = 3.0
ECHO_STROKE_WIDTH = 1.0
TEXT_STROKE_WIDTH = 2.0
TEXT_ECHO_STROKE_WIDTH = 1.5


def layer_amplitude(amplitude: float, layer_index: int) -> float:
    """Peak displacement of layer ``i``; strictly decreasing in ``i``."""
    return amplitude * (1.0 - layer_index * 0.15)


def layer_phase_offset(layer_index: int) -> float:
    return layer_index * (math.pi / 8)


def layer_opacity(layer_index: int) -> float:
    return 1.0 - layer_index * 0.1


def layer_width(layer_index: int, base_width: float = BASE_STROKE_WIDTH) -> float:
    return base_width - layer_index * 0.3


@dataclass(frozen=True)
class LayerOutput:
    """One stroke ready for a rendering surface."""

    points: np.ndarray  # (N, 2) float64, canvas coordinates
    color: "StrokeColor"
    stroke_width: float
    layer_index: int
    echo: bool = False
