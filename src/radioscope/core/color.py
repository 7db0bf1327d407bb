"""
Stroke color resolution.

Turns a ParameterSet and a layer index into an RGB stroke color, an
opacity and an optional glow descriptor. Hue is chosen by color mode,
lightness follows brightness up to a near-white ceiling so the hue stays
recognisable.
"""

import colorsys
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from radioscope.core.layer import layer_opacity
from radioscope.core.params import ParameterSet, theme_hue

MAX_LIGHTNESS = 0.85

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class DropShadow:
    radius: float
    rgb: RGB
    alpha: float

    @property
    def css(self) -> str:
        r, g, b = self.rgb
        return f"drop-shadow(0 0 {self.radius:g}px rgba({r}, {g}, {b}, {self.alpha:g}))"


@dataclass(frozen=True)
class GlowDescriptor:
    """Bloom around a stroke; grows monotonically with glow and brightness."""

    blur_radius: float
    intensity: float
    shadows: Tuple[DropShadow, ...]

    @property
    def css_filter(self) -> str:
        return " ".join(shadow.css for shadow in self.shadows)


@dataclass(frozen=True)
class StrokeColor:
    rgb: RGB
    hue: float  # degrees
    saturation: float  # 0-1
    lightness: float  # 0-1
    opacity: float  # 0-1
    glow: Optional[GlowDescriptor] = None

    @property
    def rgba(self) -> str:
        r, g, b = self.rgb
        return f"rgba({r}, {g}, {b}, {self.opacity:g})"

    @property
    def hsl(self) -> str:
        return f"hsl({self.hue:g}, {self.saturation * 100:g}%, {self.lightness * 100:g}%)"

    def rgba_bytes(self) -> Tuple[int, int, int, int]:
        """RGBA with 0-255 alpha, as Pillow expects."""
        r, g, b = self.rgb
        return (r, g, b, int(round(self.opacity * 255)))


def layer_hue(params: ParameterSet, layer_index: int) -> float:
    """
    Hue in degrees for one layer under the snapshot's color mode.

    Args:
        params: Clamped parameter snapshot.
        layer_index: Base layer index (echo layers pass their source index).

    Returns:
        Hue in [0, 360).
    """
    mode = params.color_mode
    if mode == "rainbow":
        hue = params.hue + layer_index * 60 + params.time * 30
    elif mode == "spectrum":
        # Blue (240) for the first layer sweeping to red (0) for the last
        span = max(params.wave_count - 1, 1)
        hue = 240.0 * (1.0 - min(layer_index, span) / span)
    elif mode == "theme":
        hue = theme_hue(params) + layer_index * params.color_spread
    else:
        hue = params.hue + layer_index * params.color_spread
    return hue % 360.0


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> RGB:
    """Standard HSL to 8-bit RGB. Hue in degrees, the rest in 0-1."""
    r, g, b = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness, saturation)
    return (int(r * 255 + 0.5), int(g * 255 + 0.5), int(b * 255 + 0.5))


def glow_descriptor(glow: float, effective_brightness: float, rgb: RGB, opacity: float) -> Optional[GlowDescriptor]:
    if glow <= 0:
        return None
    spread = glow * 0.15
    return GlowDescriptor(
        blur_radius=spread,
        intensity=glow * (0.05 + effective_brightness * 0.05),
        shadows=(
            DropShadow(spread, rgb, 0.7 * opacity),
            DropShadow(spread * 2, rgb, 0.4 * opacity),
        ),
    )


def resolve_color(
    params: ParameterSet,
    layer_index: int,
    opacity: Optional[float] = None,
    glow: bool = True,
    rng: Optional[np.random.Generator] = None,
) -> StrokeColor:
    """
    Resolve the stroke color of one layer.

    Args:
        params: Parameter snapshot (clamped here).
        layer_index: Base layer index.
        opacity: Base opacity before brightness attenuation. Defaults to
            the layer's own opacity (1 - 0.1*i).
        glow: Whether a glow descriptor may be produced. Echo strokes
            never glow.
        rng: Random source for the glitch hue shift. Without one the
            color is fully deterministic.

    Returns:
        StrokeColor with opacity clipped to [0, 1].
    """
    p = params.clamped()
    effective_brightness = p.brightness / 100.0

    base = layer_opacity(layer_index) if opacity is None else opacity
    final_opacity = base * min(1.5, max(0.2, effective_brightness))
    final_opacity = min(1.0, max(0.0, final_opacity))

    hue = layer_hue(p, layer_index)
    if p.glitch > 0 and rng is not None and rng.random() < p.glitch * 0.01:
        hue = (hue + rng.uniform(0, p.glitch)) % 360.0

    saturation = p.saturation / 100.0
    lightness = min(MAX_LIGHTNESS, 0.4 + effective_brightness * 0.3)
    rgb = hsl_to_rgb(hue, saturation, lightness)

    return StrokeColor(
        rgb=rgb,
        hue=hue,
        saturation=saturation,
        lightness=lightness,
        opacity=final_opacity,
        glow=glow_descriptor(p.glow, effective_brightness, rgb, final_opacity) if glow else None,
    )
