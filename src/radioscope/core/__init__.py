"""Pure waveform, contour and color computation."""

from radioscope.core.color import StrokeColor, resolve_color
from radioscope.core.echo import echo_layers, text_echo
from radioscope.core.oscillator import generate_layer
from radioscope.core.params import ParameterSet
from radioscope.core.text import GlyphRasterizer, PillowGlyphRasterizer, extract_contour

__all__ = [
    "ParameterSet",
    "StrokeColor",
    "resolve_color",
    "generate_layer",
    "echo_layers",
    "text_echo",
    "GlyphRasterizer",
    "PillowGlyphRasterizer",
    "extract_contour",
]
