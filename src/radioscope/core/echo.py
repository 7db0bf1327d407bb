"""
Echo / afterglow compositing.

Each base oscillator layer may get one decayed copy: a thinner stroke,
lagging in phase and reduced in amplitude and opacity. Text contours get
a single translated ghost instead. Echo layers never spawn echoes.
"""

import dataclasses
from typing import List, Optional

import numpy as np

from radioscope.core.color import resolve_color
from radioscope.core.layer import (
    ECHO_STROKE_WIDTH,
    TEXT_ECHO_STROKE_WIDTH,
    LayerOutput,
)
from radioscope.core.oscillator import PADDING, generate_layer
from radioscope.core.params import ParameterSet

TEXT_ECHO_OFFSET = (5.0, 3.0)


def echo_active(params: ParameterSet) -> bool:
    return params.echo > 0 or params.afterglow > 0


def echo_amplitude_scale(echo: float) -> float:
    """Amplitude factor of an echo copy; 1.0 at echo=0, 0.6 at echo=100."""
    return 1.0 - (echo / 100.0) * 0.4


def echo_phase_delay(layer_index: int, echo: float) -> float:
    return (layer_index + 1) * (echo / 100.0) * 0.2


def echo_opacity(params: ParameterSet, layer_index: int) -> float:
    """
    Base opacity of the echo of layer ``i``.

    Afterglow, when set, controls the ghost's strength directly;
    otherwise echo copies use a fixed 0.7 falloff.
    """
    falloff = 1.0 - layer_index * 0.2
    if params.afterglow > 0:
        return max(0.0, (params.afterglow / 100.0) * falloff)
    return max(0.0, falloff * 0.7)


def echo_layers(
    params: ParameterSet,
    width: float,
    height: float,
    padding: float = PADDING,
    rng: Optional[np.random.Generator] = None,
) -> List[LayerOutput]:
    """
    Build the echo copies of every base oscillator layer.

    Args:
        params: Parameter snapshot.
        width: Canvas width.
        height: Canvas height.
        padding: Horizontal margin.
        rng: Random source shared with the base layers.

    Returns:
        Echo LayerOutputs indexed ``wave_count + i``. Empty when neither
        echo nor afterglow is set; copies whose opacity falls to zero are
        left out.
    """
    p = params.clamped()
    if not echo_active(p):
        return []

    scale = echo_amplitude_scale(p.echo)
    layers = []
    for i in range(p.wave_count):
        opacity = echo_opacity(p, i)
        if opacity <= 0:
            continue
        points = generate_layer(
            p,
            i,
            width,
            height,
            padding,
            rng=rng,
            amplitude_scale=scale,
            phase_delay=echo_phase_delay(i, p.echo),
        )
        layers.append(
            LayerOutput(
                points=points,
                color=resolve_color(p, i, opacity=opacity, glow=False, rng=rng),
                stroke_width=ECHO_STROKE_WIDTH,
                layer_index=p.wave_count + i,
                echo=True,
            )
        )
    return layers


def text_echo(params: ParameterSet, contour: np.ndarray) -> Optional[LayerOutput]:
    """Single translated ghost of a text contour, or None."""
    p = params.clamped()
    if not echo_active(p) or len(contour) == 0:
        return None

    dx, dy = TEXT_ECHO_OFFSET
    dimmed = dataclasses.replace(p, brightness=p.brightness * 0.8)
    return LayerOutput(
        points=contour + np.array([dx, dy]),
        color=resolve_color(dimmed, 0, opacity=0.5 * echo_opacity(p, 0), glow=False),
        stroke_width=TEXT_ECHO_STROKE_WIDTH,
        layer_index=1,
        echo=True,
    )
