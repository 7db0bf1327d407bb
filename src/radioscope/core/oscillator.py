"""
Oscillator layer generator.

Samples one periodic layer across the canvas at a fixed resolution and
runs the effect chain in order: FM, base shape, distortion, harmonics,
tremolo, glitch, then noise on the mapped y coordinate.
"""

from typing import Optional

import numpy as np

from radioscope.core.effects import (
    TWO_PI,
    add_harmonics,
    base_shape,
    glitch_positions,
    glitch_values,
    jitter,
    modulated_frequency,
    soft_clip,
    tremolo_gain,
)
from radioscope.core.layer import layer_amplitude, layer_phase_offset
from radioscope.core.params import MAX_WAVES, ParameterSet

STEPS = 200
PADDING = 10.0


def empty_points() -> np.ndarray:
    return np.empty((0, 2), dtype=np.float64)


def flat_line(width: float, height: float, padding: float = PADDING) -> np.ndarray:
    """Two-point center line shown while the set is powered off."""
    center = height / 2.0
    return np.array([[padding, center], [width - padding, center]], dtype=np.float64)


def generate_layer(
    params: ParameterSet,
    layer_index: int,
    width: float,
    height: float,
    padding: float = PADDING,
    rng: Optional[np.random.Generator] = None,
    steps: int = STEPS,
    amplitude_scale: float = 1.0,
    phase_delay: float = 0.0,
) -> np.ndarray:
    """
    Generate the sample points of one oscillator layer.

    Args:
        params: Parameter snapshot; clamped before use, never mutated.
        layer_index: Layer in [0, wave_count). Clamped to [0, 7].
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        padding: Horizontal margin on both sides.
        rng: Random source for glitch and noise. Only consulted when
            either effect is active; a fresh unseeded generator is used
            if none is given.
        steps: Number of intervals; the layer has ``steps + 1`` samples.
        amplitude_scale: Extra amplitude factor (echo decay).
        phase_delay: Radians subtracted from the total phase (echo lag).

    Returns:
        (steps + 1, 2) array of (x, y) points, the two-point flat line
        when powered off, or an empty (0, 2) array when the canvas is
        narrower than its padding.
    """
    # Negated so NaN sizes also take the empty path
    if not (width > 2 * padding and height > 0):
        return empty_points()

    p = params.clamped()
    if not p.power_on:
        return flat_line(width, height, padding)

    index = min(max(int(layer_index), 0), MAX_WAVES - 1)
    steps = max(int(steps), 1)

    i = np.arange(steps + 1, dtype=np.float64)
    normal_x = i / steps
    x = padding + i * (width - 2 * padding) / steps

    freq = modulated_frequency(p.frequency, p.modulation, p.time)
    total_phase = (
        normal_x * freq * TWO_PI
        + p.phase
        + layer_phase_offset(index)
        + p.time
        - phase_delay
    )

    value = base_shape(total_phase, p.shape_index, p.distortion)
    value = soft_clip(value, p.distortion)
    value = add_harmonics(value, total_phase, p.harmonics)
    value = value * tremolo_gain(p.tremolo, p.time)

    if p.glitch > 0 or p.noise > 0:
        rng = rng if rng is not None else np.random.default_rng()
        value = glitch_values(value, p.glitch, rng)
        x = glitch_positions(x, p.glitch, rng)

    amplitude = layer_amplitude(p.amplitude, index) * amplitude_scale
    y = height / 2.0 - amplitude * value

    if p.noise > 0:
        y = jitter(y, p.noise, rng)

    return np.column_stack((x, y))
