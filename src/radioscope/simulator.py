"""
Animation driver.

The core computes one frame from a snapshot and a clock value; this
module supplies the clock, a seeded random source, the display theme
picked by the hue control and the traced text outline, and turns the
result into rendered frames.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import numpy as np

from radioscope.compute import compute
from radioscope.core.layer import LayerOutput
from radioscope.core.params import DEFAULT_THEME, THEME_HUES, ParameterSet, theme_for_hue
from radioscope.core.text import (
    GlyphRasterizer,
    PillowGlyphRasterizer,
    apply_contour_effects,
    trace_text,
)
from radioscope.render.raster import DisplayConfig, FrameRenderer

# Exact multiple of 2pi, so wrapping never jumps the oscillator phase
TIME_PERIOD = 32 * math.pi


@dataclass
class SimulatorConfig:
    width: int = 800
    height: int = 250
    padding: float = 10.0
    fps: int = 20  # one tick every 50 ms
    time_step: float = 0.1  # clock advance per tick at speed 1
    time_period: float = TIME_PERIOD


def advance_time(time: float, speed: float, step: float = 0.1, period: float = TIME_PERIOD) -> float:
    """Next clock value, wrapped into [0, period)."""
    return (time + step * speed) % period


class WaveSimulator:
    """
    Stateful driver around the pure ``compute`` function.

    Holds the current parameter snapshot and clock. The clock only runs
    while the set is powered on.

    Without an explicit theme, the display theme follows the hue control
    and keeps the last selected theme for hues outside every theme range.
    Text is rasterized only when the string or canvas changes; contour
    effects are re-applied on every tick so they animate with the clock.
    """

    def __init__(
        self,
        params: Optional[ParameterSet] = None,
        config: Optional[SimulatorConfig] = None,
        rasterizer: Optional[GlyphRasterizer] = None,
        seed: Optional[int] = None,
    ):
        self.cfg = config or SimulatorConfig()
        self.rasterizer = rasterizer or PillowGlyphRasterizer()
        self.rng = np.random.default_rng(seed)
        self.display_theme = DEFAULT_THEME
        self.set_params(params or ParameterSet())
        self.time = self.params.time

        self._outline_key = None
        self._outline: Optional[np.ndarray] = None
        self.rasterizations = 0

    def set_params(self, params: ParameterSet):
        """Swap in a new snapshot; the clock keeps running from where it was."""
        self.params = params.clamped()
        if self.params.theme in THEME_HUES:
            self.display_theme = self.params.theme
        else:
            self.display_theme = theme_for_hue(self.params.hue, self.display_theme)

    def update(self, **changes):
        self.set_params(dataclasses.replace(self.params, **changes))

    def advance(self) -> float:
        if self.params.power_on:
            self.time = advance_time(
                self.time, self.params.speed, self.cfg.time_step, self.cfg.time_period
            )
        return self.time

    def snapshot(self) -> ParameterSet:
        """Current parameters at the current clock value, theme resolved."""
        return dataclasses.replace(self.params, time=self.time, theme=self.display_theme)

    def outline(self) -> np.ndarray:
        """Bare text silhouette, re-traced only when the text or canvas changes."""
        key = (self.params.text_input, self.cfg.width, self.cfg.height)
        if key != self._outline_key:
            self._outline = trace_text(
                self.params.text_input,
                self.rasterizer,
                self.cfg.width,
                self.cfg.height,
            )
            self._outline_key = key
            self.rasterizations += 1
        return self._outline

    def contour(self) -> np.ndarray:
        """Text contour for the current tick: the cached outline with effects applied."""
        outline = self.outline()
        if len(outline) == 0:
            return outline
        return apply_contour_effects(
            outline, self.snapshot(), self.cfg.width, self.cfg.height, rng=self.rng
        )

    def layers(self) -> List[LayerOutput]:
        p = self.snapshot()
        contour = None
        if p.text_mode and p.power_on and p.text_input.strip():
            contour = self.contour()
        return compute(
            p,
            width=self.cfg.width,
            height=self.cfg.height,
            padding=self.cfg.padding,
            rng=self.rng,
            rasterizer=self.rasterizer,
            contour=contour,
        )

    def render_frames(
        self,
        n_frames: int,
        renderer: Optional[FrameRenderer] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Iterator[np.ndarray]:
        """
        Render ``n_frames`` consecutive ticks as a generator.

        Args:
            n_frames: Number of frames.
            renderer: Raster renderer sized like the simulator canvas.
            progress_callback: Optional callback(current, total).

        Yields:
            (H, W, 3) uint8 RGB arrays, one per tick.
        """
        if renderer is None:
            renderer = FrameRenderer(DisplayConfig(width=self.cfg.width, height=self.cfg.height))

        for i in range(n_frames):
            yield renderer.render(self.layers())
            self.advance()
            if progress_callback:
                progress_callback(i + 1, n_frames)
