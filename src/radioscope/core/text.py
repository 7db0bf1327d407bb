"""
Text-to-contour extraction.

Renders a string into an alpha mask, traces the upper silhouette of the
glyphs left to right and the lower silhouette right to left, and runs a
point-indexed version of the oscillator effect chain over the result.

The rasterizer is a pluggable capability: anything with a ``rasterize``
method returning an (H, W) alpha array works. ``PillowGlyphRasterizer``
is the default implementation.
"""

import math
from typing import Optional, Protocol

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from radioscope.core.oscillator import empty_points
from radioscope.core.params import MAX_TEXT_LENGTH, ParameterSet

MAX_FONT_SIZE = 100.0
DEFAULT_FONT = "DejaVuSansMono-Bold.ttf"


class GlyphRasterizer(Protocol):
    def rasterize(self, text: str, width: int, height: int, font_size: float) -> np.ndarray:
        """Draw ``text`` centered; return an (height, width) uint8 alpha array."""
        ...


class PillowGlyphRasterizer:
    """
    Glyph rasterizer backed by Pillow.

    Uses a bold monospace TrueType face when one can be found and falls
    back to Pillow's bundled default font otherwise.
    """

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path or DEFAULT_FONT
        self._fonts = {}

    def _font(self, size: int):
        if size not in self._fonts:
            try:
                font = ImageFont.truetype(self.font_path, size)
            except OSError:
                font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return self._fonts[size]

    def rasterize(self, text: str, width: int, height: int, font_size: float) -> np.ndarray:
        mask = Image.new("L", (int(width), int(height)), 0)
        draw = ImageDraw.Draw(mask)
        font = self._font(max(1, int(font_size)))

        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = (width - (right - left)) / 2 - left
        y = (height - (bottom - top)) / 2 - top
        draw.text((x, y), text, fill=255, font=font)

        return np.asarray(mask, dtype=np.uint8)


def font_size_for(text: str, width: float) -> float:
    """Font size that lets ``text`` fit the canvas width."""
    return min(MAX_FONT_SIZE, width / (len(text) * 0.7))


def sample_step_for(text: str) -> int:
    """Column stride: every pixel for short strings, up to 3 for long ones."""
    return max(1, min(3, len(text) // 8))


def trace_silhouette(alpha: np.ndarray, step: int = 1) -> np.ndarray:
    """
    Trace the top and bottom edges of an alpha mask.

    Args:
        alpha: (H, W) array; any non-zero value counts as ink.
        step: Column stride.

    Returns:
        (N, 2) float array: (x, topY) ascending in x followed by
        (x, bottomY) descending in x. Empty columns are skipped.
    """
    columns = np.arange(0, alpha.shape[1], max(1, int(step)))
    ink = alpha[:, columns] > 0
    has_ink = ink.any(axis=0)
    if not has_ink.any():
        return empty_points()

    xs = columns[has_ink]
    ink = ink[:, has_ink]
    top = ink.argmax(axis=0)
    bottom = ink.shape[0] - 1 - ink[::-1].argmax(axis=0)

    upper = np.column_stack((xs, top))
    lower = np.column_stack((xs, bottom))[::-1]
    return np.vstack((upper, lower)).astype(np.float64)


def apply_contour_effects(
    points: np.ndarray,
    params: ParameterSet,
    width: float,
    height: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Point-indexed effect chain for text contours.

    Distortion jitters harder towards the left and right edges,
    modulation and harmonics bend the outline along its length, tremolo
    breathes the contour around the vertical center, glitch makes sparse
    jumps and noise adds dense fine jitter.
    """
    p = params.clamped()
    total = len(points)
    if total == 0:
        return points

    x = points[:, 0].copy()
    y = points[:, 1].copy()
    index = np.arange(total, dtype=np.float64)
    position = index / total

    needs_rng = p.distortion > 0 or p.glitch > 0 or p.noise > 0
    if needs_rng and rng is None:
        rng = np.random.default_rng()

    if p.distortion > 0:
        edge_factor = 1 + np.abs(x / width - 0.5)
        y += rng.uniform(-1.0, 1.0, total) * p.distortion * 10 * edge_factor

    if p.modulation > 0:
        y += np.sin(position * 2 * math.pi + p.time * 2) * p.modulation * 20

    if p.harmonics > 0:
        y += np.sin(position * math.pi * 6) * p.harmonics * 10

    if p.tremolo > 0:
        center = height / 2.0
        y = center + (y - center) * (1 + np.sin(index * 0.1) * p.tremolo * 0.5)

    if p.color_mode == "rainbow":
        wiggle = np.sin(index * 0.1 + p.time) * 2
        y = np.where(index % 5 == 0, y + wiggle, y)

    if p.glitch > 0:
        reach = p.glitch * 0.15
        hit_x = rng.random(total) < 0.1
        hit_y = rng.random(total) < 0.1
        x = np.where(hit_x, x + rng.uniform(-reach, reach, total), x)
        y = np.where(hit_y, y + rng.uniform(-reach, reach, total), y)

    if p.noise > 0:
        y += rng.uniform(-1.0, 1.0, total) * p.noise * 0.05

    return np.column_stack((x, y))


def trace_text(
    text: str,
    rasterizer: GlyphRasterizer,
    width: float,
    height: float,
) -> np.ndarray:
    """
    Rasterize text and trace its bare silhouette, without effects.

    Returns:
        (N, 2) point array; empty for blank text, a degenerate canvas,
        or text that rasterizes to no ink at all.
    """
    text = (text or "")[:MAX_TEXT_LENGTH]
    if not text.strip() or not (width >= 1 and height >= 1):
        return empty_points()

    w, h = int(width), int(height)
    alpha = np.asarray(rasterizer.rasterize(text, w, h, font_size_for(text, w)))
    if alpha.ndim != 2 or alpha.size == 0:
        return empty_points()
    return trace_silhouette(alpha, sample_step_for(text))


def extract_contour(
    text: str,
    rasterizer: GlyphRasterizer,
    params: ParameterSet,
    width: float,
    height: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Turn text into a single strokeable contour.

    Args:
        text: Input string (the first 20 characters are used).
        rasterizer: Glyph rasterizer producing the alpha mask.
        params: Parameter snapshot driving the effects.
        width: Canvas width.
        height: Canvas height.
        rng: Random source for distortion, glitch and noise.

    Returns:
        (N, 2) point array; empty for blank text, a degenerate canvas,
        or text that rasterizes to no ink at all. Callers fall back to
        oscillator mode on an empty result.
    """
    outline = trace_text(text, rasterizer, width, height)
    if len(outline) == 0:
        return outline
    return apply_contour_effects(outline, params, int(width), int(height), rng)
