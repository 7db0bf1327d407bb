"""
Parameter snapshot for one waveform computation.

A ParameterSet is created by the control surface on every adjustment and
handed to the core as an immutable value. Ranges documented on each field
are contracts the generators assume; ``clamped()`` forces any snapshot
back into them so out-of-range input never crashes the core.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

MAX_WAVES = 8
MAX_TEXT_LENGTH = 20

SHAPE_NAMES = ("SINE", "SQUARE", "TRIANGLE", "SAWTOOTH")
COLOR_MODES = ("theme", "rainbow", "spectrum", "direct")

# Display themes and their base hue in degrees
THEME_HUES = {
    "green": 120.0,
    "amber": 35.0,
    "blue": 210.0,
    "purple": 270.0,
    "red": 0.0,
}

DEFAULT_THEME = "green"

# Half-open hue ranges that select a theme when none is set explicitly.
# Hues outside every range keep the previous theme.
HUE_THEME_RANGES = (
    (90.0, 150.0, "green"),
    (0.0, 60.0, "amber"),
    (180.0, 270.0, "blue"),
)

# Inclusive numeric ranges enforced by ParameterSet.clamped()
RANGES = {
    "amplitude": (10.0, 150.0),
    "frequency": (0.5, 5.0),
    "phase": (0.0, 2 * math.pi),
    "waveform": (0.0, 1.0),
    "distortion": (0.0, 1.0),
    "harmonics": (0.0, 1.0),
    "modulation": (0.0, 1.0),
    "tremolo": (0.0, 1.0),
    "noise": (0.0, 100.0),
    "glitch": (0.0, 100.0),
    "echo": (0.0, 100.0),
    "afterglow": (0.0, 100.0),
    "speed": (0.1, 5.0),
    "saturation": (0.0, 100.0),
    "color_spread": (0.0, 30.0),
    "brightness": (10.0, 200.0),
    "glow": (0.0, 100.0),
}

# camelCase keys of the web control panel state
CAMEL_CASE_ALIASES = {
    "waveCount": "wave_count",
    "colorSpread": "color_spread",
    "colorMode": "color_mode",
    "displayTheme": "theme",
    "powerOn": "power_on",
    "textMode": "text_mode",
    "textWaveMode": "text_mode",
    "textInput": "text_input",
}


@dataclass(frozen=True)
class ParameterSet:
    """Immutable snapshot of every tunable value."""

    # Oscillator
    amplitude: float = 50.0  # pixels, [10, 150]
    frequency: float = 1.0  # periods per frame width, [0.5, 5]
    phase: float = 0.0  # radians, [0, 2pi]
    wave_count: int = 3  # overlaid layers, [1, 8]
    waveform: float = 0.0  # continuous shape selector, [0, 1)

    # Effects
    distortion: float = 0.0
    harmonics: float = 0.0
    modulation: float = 0.0
    tremolo: float = 0.0
    noise: float = 0.0  # [0, 100]
    glitch: float = 0.0  # [0, 100]
    echo: float = 0.0  # [0, 100]
    afterglow: float = 0.0  # [0, 100]
    speed: float = 1.0  # clock multiplier, [0.1, 5]

    # Color
    hue: float = 120.0  # degrees, wraps at 360
    saturation: float = 70.0
    color_spread: float = 10.0  # degrees per layer, [0, 30]
    color_mode: str = "theme"  # "theme", "rainbow", "spectrum", "direct"
    theme: Optional[str] = None  # key of THEME_HUES, None = follow hue
    brightness: float = 100.0  # percent, [10, 200]
    glow: float = 0.0  # [0, 100]

    # State
    time: float = 0.0
    power_on: bool = True
    text_mode: bool = False
    text_input: str = ""

    @property
    def shape_index(self) -> int:
        """Quantized waveform: 0 sine, 1 square, 2 triangle, 3 sawtooth."""
        w = _finite(self.waveform, 0.0)
        w = min(max(w, 0.0), 1.0)
        return min(3, int(math.floor(w * 4)))

    @property
    def waveform_name(self) -> str:
        if self.text_mode:
            return "TEXT"
        return SHAPE_NAMES[self.shape_index]

    def clamped(self) -> "ParameterSet":
        """Return a copy with every field forced into its valid range."""
        defaults = _DEFAULTS
        changes: Dict[str, Any] = {}

        for name, (lo, hi) in RANGES.items():
            value = _finite(getattr(self, name), getattr(defaults, name))
            changes[name] = min(max(float(value), lo), hi)

        count = _finite(self.wave_count, defaults.wave_count)
        changes["wave_count"] = min(max(int(round(count)), 1), MAX_WAVES)
        changes["hue"] = float(_finite(self.hue, defaults.hue)) % 360.0
        changes["time"] = float(_finite(self.time, 0.0))

        if self.color_mode not in COLOR_MODES:
            changes["color_mode"] = "direct"
        changes["power_on"] = bool(self.power_on)
        changes["text_mode"] = bool(self.text_mode)
        changes["text_input"] = str(self.text_input or "")[:MAX_TEXT_LENGTH]

        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParameterSet":
        """
        Build a snapshot from a plain mapping.

        Accepts snake_case field names and the camelCase keys of the
        web control panel. Unknown keys are ignored.

        Raises:
            ValueError: If a numeric field holds a non-numeric value or a
                flag holds something other than a boolean.
        """
        fields = {f.name: f for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name not in fields:
                continue
            kwargs[name] = _coerce(name, value)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


_DEFAULTS = ParameterSet()


def _finite(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if math.isnan(number) or math.isinf(number):
        return fallback
    return number


_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _coerce(name: str, value: Any) -> Any:
    if name in ("power_on", "text_mode"):
        return _coerce_bool(name, value)
    if name in ("color_mode", "text_input"):
        return str(value)
    if name == "theme":
        return None if value is None else str(value)
    if name == "wave_count":
        try:
            return int(round(float(value)))
        except (TypeError, ValueError):
            raise ValueError(f"wave_count must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be numeric, got {value!r}")


def theme_for_hue(hue: float, previous: str = DEFAULT_THEME) -> str:
    """
    Display theme selected by the hue control.

    Args:
        hue: Hue in degrees; wrapped into [0, 360).
        previous: Theme kept when the hue falls outside every range.
    """
    h = _finite(hue, 0.0) % 360.0
    for lo, hi, theme in HUE_THEME_RANGES:
        if lo <= h < hi:
            return theme
    return previous


def theme_hue(params: ParameterSet, previous: str = DEFAULT_THEME) -> float:
    """Base hue for theme mode: an explicit named theme, else the one the hue selects."""
    if params.theme in THEME_HUES:
        return THEME_HUES[params.theme]
    return THEME_HUES[theme_for_hue(params.hue, previous)]
