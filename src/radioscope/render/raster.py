"""
Raster rendering surface.

Strokes LayerOutputs onto an oscilloscope-style canvas with Pillow and
finishes the frame with the CRT post-processing chain. This is the
renderer side of the core/renderer split: it is stateful (phosphor
persistence) while the core is not.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from radioscope.core.layer import LayerOutput
from radioscope.render.colorgrade import (
    add_glow,
    phosphor_decay,
    scanlines,
    vignette,
)


@dataclass
class DisplayConfig:
    """Configuration for the raster display."""

    width: int = 800
    height: int = 250

    background: Tuple[int, int, int] = (6, 14, 9)
    graticule: bool = True
    graticule_color: Tuple[int, int, int] = (24, 52, 34)
    graticule_divisions: Tuple[int, int] = (10, 4)  # columns, rows

    # Post-processing
    glow_enabled: bool = True
    bloom_intensity: float = 0.0
    bloom_radius: float = 6.0
    phosphor_persistence: float = 0.0
    scanline_strength: float = 0.12
    vignette_strength: float = 0.3


class FrameRenderer:
    """
    Renders frames of layers as (H, W, 3) uint8 RGB arrays.

    Keeps the last frame as a phosphor buffer when persistence is on;
    call ``reset()`` between unrelated sequences.
    """

    def __init__(self, config: Optional[DisplayConfig] = None):
        self.cfg = config or DisplayConfig()
        self.previous: Optional[np.ndarray] = None

    @property
    def size(self) -> Tuple[int, int]:
        return (self.cfg.width, self.cfg.height)

    def reset(self):
        self.previous = None

    def _draw_graticule(self, canvas: Image.Image):
        cfg = self.cfg
        draw = ImageDraw.Draw(canvas)
        cols, rows = cfg.graticule_divisions
        for c in range(1, max(cols, 1)):
            x = c * cfg.width / cols
            draw.line([(x, 0), (x, cfg.height)], fill=cfg.graticule_color, width=1)
        for r in range(1, max(rows, 1)):
            y = r * cfg.height / rows
            draw.line([(0, y), (cfg.width, y)], fill=cfg.graticule_color, width=1)

    def _stroke(self, layer: LayerOutput, rgba, width: float) -> Image.Image:
        overlay = Image.new("RGBA", self.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).line(
            layer.points.ravel().tolist(),
            fill=rgba,
            width=max(1, int(round(width))),
            joint="curve",
        )
        return overlay

    def _halos(self, layer: LayerOutput) -> Iterable[Image.Image]:
        """Blurred, widened copies of the stroke, one per drop shadow."""
        glow = layer.color.glow
        r, g, b = layer.color.rgb
        for shadow in glow.shadows:
            halo = self._stroke(
                layer,
                (r, g, b, int(round(min(shadow.alpha, 1.0) * 255))),
                layer.stroke_width + shadow.radius,
            )
            if shadow.radius > 0:
                halo = halo.filter(ImageFilter.GaussianBlur(radius=shadow.radius))
            yield halo

    def render(self, layers: Iterable[LayerOutput]) -> np.ndarray:
        """
        Render one frame.

        Args:
            layers: Strokes in back-to-front order.

        Returns:
            (H, W, 3) uint8 RGB array.
        """
        cfg = self.cfg
        canvas = Image.new("RGBA", self.size, tuple(cfg.background) + (255,))
        if cfg.graticule:
            self._draw_graticule(canvas)

        for layer in layers:
            if len(layer.points) < 2:
                continue
            if cfg.glow_enabled and layer.color.glow is not None:
                for halo in self._halos(layer):
                    canvas.alpha_composite(halo)
            canvas.alpha_composite(
                self._stroke(layer, layer.color.rgba_bytes(), layer.stroke_width)
            )

        frame = np.array(canvas.convert("RGB"), dtype=np.uint8)

        if cfg.bloom_intensity > 0:
            frame = add_glow(frame, intensity=cfg.bloom_intensity, radius=cfg.bloom_radius)

        frame = phosphor_decay(frame, self.previous, persistence=cfg.phosphor_persistence)
        self.previous = frame

        if cfg.scanline_strength > 0:
            frame = scanlines(frame, strength=cfg.scanline_strength)
        if cfg.vignette_strength > 0:
            frame = vignette(frame, strength=cfg.vignette_strength)
        return frame
