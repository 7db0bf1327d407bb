"""
The pure tick function.

``compute`` turns one parameter snapshot and one clock value into the
complete, ordered list of strokes for a frame. It owns no clock and
keeps no state between calls; the caller decides when to call it.
"""

import dataclasses
from typing import List, Optional

import numpy as np

from radioscope.core.color import resolve_color
from radioscope.core.echo import echo_layers, text_echo
from radioscope.core.layer import TEXT_STROKE_WIDTH, LayerOutput, layer_width
from radioscope.core.oscillator import PADDING, generate_layer
from radioscope.core.params import ParameterSet
from radioscope.core.text import GlyphRasterizer, PillowGlyphRasterizer, extract_contour

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 250


def oscillator_layers(
    params: ParameterSet,
    width: float,
    height: float,
    padding: float = PADDING,
    rng: Optional[np.random.Generator] = None,
) -> List[LayerOutput]:
    """Base layers 0..wave_count-1 followed by their echo copies."""
    p = params.clamped()
    layers = []
    for i in range(p.wave_count):
        layers.append(
            LayerOutput(
                points=generate_layer(p, i, width, height, padding, rng=rng),
                color=resolve_color(p, i, rng=rng),
                stroke_width=layer_width(i),
                layer_index=i,
            )
        )
    if p.power_on:
        layers.extend(echo_layers(p, width, height, padding, rng=rng))
    return layers


def text_layers(params: ParameterSet, contour: np.ndarray) -> List[LayerOutput]:
    """Main text stroke plus its optional ghost copy."""
    p = params.clamped()
    layers = [
        LayerOutput(
            points=contour,
            color=resolve_color(p, 0, opacity=1.0),
            stroke_width=TEXT_STROKE_WIDTH,
            layer_index=0,
        )
    ]
    ghost = text_echo(p, contour)
    if ghost is not None:
        layers.append(ghost)
    return layers


def compute(
    params: ParameterSet,
    time: Optional[float] = None,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    padding: float = PADDING,
    rng: Optional[np.random.Generator] = None,
    rasterizer: Optional[GlyphRasterizer] = None,
    contour: Optional[np.ndarray] = None,
) -> List[LayerOutput]:
    """
    Compute every stroke of one frame.

    Args:
        params: Parameter snapshot.
        time: Clock value; overrides ``params.time`` when given.
        width: Canvas width.
        height: Canvas height.
        padding: Horizontal margin for oscillator layers.
        rng: Random source for glitch and noise.
        rasterizer: Glyph rasterizer for text mode. Defaults to Pillow.
        contour: Precomputed text contour. Skips rasterization, letting
            callers reuse an expensive contour across ticks.

    Returns:
        Ordered LayerOutputs. Text mode falls back to oscillator layers
        when powered off or when the text produces no contour.
    """
    p = params.clamped()
    if time is not None:
        p = dataclasses.replace(p, time=float(time))

    if p.text_mode and p.power_on and p.text_input.strip():
        if contour is None:
            contour = extract_contour(
                p.text_input,
                rasterizer or PillowGlyphRasterizer(),
                p,
                width,
                height,
                rng=rng,
            )
        if len(contour) > 0:
            return text_layers(p, contour)

    return oscillator_layers(p, width, height, padding, rng=rng)
