"""
CRT-style post-processing for rendered frames.

Bloom, phosphor persistence, scanlines and vignette. All functions take
and return (H, W, 3) uint8 RGB arrays and pass frames through untouched
when their strength is zero.
"""

import numpy as np
from PIL import Image, ImageFilter
from scipy.ndimage import gaussian_filter


def add_glow(
    frame: np.ndarray,
    intensity: float = 0.3,
    radius: float = 6.0,
) -> np.ndarray:
    """
    Screen-blend a blurred copy of the frame over itself.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        intensity: Bloom opacity (0-1).
        radius: Gaussian blur radius in pixels.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    if intensity <= 0 or radius <= 0:
        return frame

    blurred = Image.fromarray(frame).filter(ImageFilter.GaussianBlur(radius=radius))
    a = frame.astype(np.float32) / 255.0
    b = np.asarray(blurred, dtype=np.float32) / 255.0 * min(intensity, 1.0)

    # Screen: 1 - (1-a)(1-b) never darkens
    screen = 1.0 - (1.0 - a) * (1.0 - b)
    return np.round(np.clip(screen, 0, 1) * 255).astype(np.uint8)


def phosphor_decay(
    frame: np.ndarray,
    previous: np.ndarray | None,
    persistence: float = 0.6,
    diffusion: float = 0.8,
) -> np.ndarray:
    """
    Blend in a fading, slightly smeared trace of earlier frames.

    The previous buffer is dimmed by ``persistence`` and diffused by a
    small gaussian before taking the per-pixel maximum with the new frame,
    the way a slow phosphor keeps glowing after the beam has moved on.

    Args:
        frame: Current (H, W, 3) uint8 frame.
        previous: Persistence buffer returned by the last call, or None.
        persistence: Fraction of brightness kept per frame (0-1).
        diffusion: Gaussian sigma in pixels applied to the old trace.

    Returns:
        (H, W, 3) uint8 frame, also suitable as the next ``previous``.
    """
    if previous is None or persistence <= 0 or previous.shape != frame.shape:
        return frame

    trace = previous.astype(np.float32) * min(persistence, 0.99)
    if diffusion > 0:
        trace = gaussian_filter(trace, sigma=(diffusion, diffusion, 0))
    merged = np.maximum(frame.astype(np.float32), trace)
    return np.clip(merged, 0, 255).astype(np.uint8)


def scanlines(
    frame: np.ndarray,
    strength: float = 0.15,
    period: int = 3,
) -> np.ndarray:
    """
    Darken every ``period``-th row.

    Args:
        frame: (H, W, 3) uint8.
        strength: Darkening of affected rows (0 = none, 1 = black).
        period: Row spacing of the lines.
    """
    if strength <= 0 or period < 2:
        return frame

    result = frame.astype(np.float32)
    result[::period] *= 1.0 - min(strength, 1.0)
    return result.astype(np.uint8)


def vignette(
    frame: np.ndarray,
    strength: float = 0.3,
) -> np.ndarray:
    """
    Radial darkening towards the corners, like a curved tube face.

    Args:
        frame: (H, W, 3) uint8.
        strength: 0 = none, 1 = black corners.
    """
    if strength <= 0:
        return frame

    h, w = frame.shape[:2]
    y = (np.arange(h, dtype=np.float32) - h / 2) / max(h / 2, 1)
    x = (np.arange(w, dtype=np.float32) - w / 2) / max(w / 2, 1)
    # Normalised so the corners sit at radius 1
    r = np.sqrt(x[None, :] ** 2 + y[:, None] ** 2) / np.sqrt(2)

    falloff = 1.0 - np.clip(r * strength, 0, 1) ** 2
    return (frame.astype(np.float32) * falloff[:, :, None]).astype(np.uint8)
