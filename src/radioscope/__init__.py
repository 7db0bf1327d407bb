"""Animated retro oscilloscope waveforms and text contours."""

from radioscope.compute import compute
from radioscope.core.layer import LayerOutput
from radioscope.core.params import ParameterSet
from radioscope.simulator import WaveSimulator

__version__ = "0.1.0"
__all__ = [
    "compute",
    "LayerOutput",
    "ParameterSet",
    "WaveSimulator",
]
