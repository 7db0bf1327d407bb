"""
Base oscillator shapes and the ordered effect chain.

Every function operates on whole sample arrays at once. Effects are
identities when their parameter is zero, so a chain with all effects
disabled reproduces the bare shape exactly.
"""

import math

import numpy as np

TWO_PI = 2 * math.pi


def sine(phase: np.ndarray, distortion: float = 0.0) -> np.ndarray:
    return np.sin(phase)


def square(phase: np.ndarray, distortion: float = 0.0) -> np.ndarray:
    """
    Square wave with softened zero crossings.

    At low distortion the samples nearest a crossing are scaled down in
    proportion to |sin|, replacing the vertical step with a short ramp.
    """
    s = np.sin(phase)
    value = np.where(s >= 0, 1.0, -1.0)
    if distortion < 0.3:
        near_zero = np.abs(s) < 0.1
        value = np.where(near_zero, value * np.abs(s) * 10, value)
    return value


def triangle(phase: np.ndarray, distortion: float = 0.0) -> np.ndarray:
    return np.arcsin(np.sin(phase)) * (2 / math.pi)


def sawtooth(phase: np.ndarray, distortion: float = 0.0) -> np.ndarray:
    """Centered ramp in [-1, 1], slightly attenuated next to the reset edge."""
    cycles = phase / TWO_PI
    saw = cycles - np.floor(0.5 + cycles)
    value = 2 * saw
    return np.where(np.abs(saw) > 0.45, value * 0.98, value)


SHAPES = (sine, square, triangle, sawtooth)


def base_shape(phase: np.ndarray, shape_index: int, distortion: float = 0.0) -> np.ndarray:
    """
    Evaluate the selected base shape.

    Args:
        phase: Total phase per sample, in radians.
        shape_index: 0 sine, 1 square, 2 triangle, 3 sawtooth.
        distortion: Only consulted by the square wave's corner smoothing.

    Returns:
        Array of shape values, nominally in [-1, 1].
    """
    shape = SHAPES[min(max(int(shape_index), 0), len(SHAPES) - 1)]
    return shape(np.asarray(phase, dtype=np.float64), distortion)


def modulated_frequency(frequency: float, modulation: float, time: float) -> float:
    """Frequency after slow FM driven by the clock."""
    if modulation > 0:
        return frequency * (1 + modulation * 0.3 * math.sin(time * 2))
    return frequency


def soft_clip(values: np.ndarray, distortion: float) -> np.ndarray:
    """
    tanh saturation normalised so that +/-1 maps to +/-1.

    Args:
        values: Shape values.
        distortion: Drive amount (0-1). Zero passes values through.
    """
    if distortion <= 0:
        return values
    k = 1 + distortion * 5
    return np.tanh(values * k) / math.tanh(k)


def add_harmonics(values: np.ndarray, phase: np.ndarray, harmonics: float) -> np.ndarray:
    """
    Mix in the 3rd, 5th and 7th partials and renormalise.

    The divisor 1 + 0.53*h is the sum of the partial weights
    (0.3 + 0.15 + 0.08), keeping the peak bounded at harmonics=1.
    """
    if harmonics <= 0:
        return values
    mixed = (
        values
        + harmonics * 0.3 * np.sin(3 * phase)
        + harmonics * 0.15 * np.sin(5 * phase)
        + harmonics * 0.08 * np.sin(7 * phase)
    )
    return mixed / (1 + harmonics * 0.53)


def tremolo_gain(tremolo: float, time: float) -> float:
    """Amplitude envelope applied uniformly to a whole layer."""
    if tremolo > 0:
        return 1 - tremolo * 0.5 * math.sin(time * 5)
    return 1.0


def glitch_values(
    values: np.ndarray,
    glitch: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Sparse large kicks on shape values (probability glitch*0.005 per sample)."""
    if glitch <= 0:
        return values
    n = values.shape[0]
    hit = rng.random(n) < glitch * 0.005
    kick = rng.uniform(-1.0, 1.0, n) * glitch * 0.1
    return np.where(hit, values + kick, values)


def glitch_positions(
    x: np.ndarray,
    glitch: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Rare horizontal tears, independent of the value glitches."""
    if glitch <= 0:
        return x
    n = x.shape[0]
    hit = rng.random(n) < glitch * 0.002
    shift = rng.uniform(-1.0, 1.0, n) * glitch * 0.05
    return np.where(hit, x + shift, x)


def jitter(y: np.ndarray, noise: float, rng: np.random.Generator) -> np.ndarray:
    """Dense small vertical noise in pixels, at most noise*0.05."""
    if noise <= 0:
        return y
    return y + rng.uniform(-1.0, 1.0, y.shape[0]) * noise * 0.05
