"""
CLI entry point for rendering waveform animations.

Usage:
    radioscope [options] -o waves.mp4
    radioscope --text "HELLO" --glow 40 -o hello.gif
"""

import argparse
import dataclasses
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from radioscope.config import load_params, save_params
from radioscope.core.params import COLOR_MODES, SHAPE_NAMES, THEME_HUES, ParameterSet
from radioscope.render.encoder import QUALITY_PRESETS, write_animation
from radioscope.render.raster import DisplayConfig, FrameRenderer
from radioscope.simulator import SimulatorConfig, WaveSimulator

# (flag, field, type, help)
NUMERIC_OPTIONS = [
    ("--amplitude", "amplitude", float, "Peak displacement in pixels (10-150)"),
    ("--frequency", "frequency", float, "Periods across the display (0.5-5)"),
    ("--phase", "phase", float, "Phase offset in radians (0-2pi)"),
    ("--wave-count", "wave_count", int, "Overlaid layers (1-8)"),
    ("--waveform", "waveform", float, "Continuous shape selector (0-1)"),
    ("--distortion", "distortion", float, "Soft-clip drive (0-1)"),
    ("--harmonics", "harmonics", float, "3rd/5th/7th partial mix (0-1)"),
    ("--modulation", "modulation", float, "Frequency modulation depth (0-1)"),
    ("--tremolo", "tremolo", float, "Amplitude modulation depth (0-1)"),
    ("--noise", "noise", float, "Fine jitter (0-100)"),
    ("--glitch", "glitch", float, "Sparse glitches (0-100)"),
    ("--echo", "echo", float, "Echo copies (0-100)"),
    ("--afterglow", "afterglow", float, "Afterglow strength (0-100)"),
    ("--speed", "speed", float, "Clock speed multiplier (0.1-5)"),
    ("--hue", "hue", float, "Base hue in degrees"),
    ("--saturation", "saturation", float, "Saturation percent (0-100)"),
    ("--color-spread", "color_spread", float, "Hue step per layer (0-30)"),
    ("--brightness", "brightness", float, "Brightness percent (10-200)"),
    ("--glow", "glow", float, "Glow amount (0-100)"),
]


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def add_param_arguments(parser: argparse.ArgumentParser):
    """Options shared by the render and preview commands."""
    group = parser.add_argument_group("waveform parameters")
    group.add_argument(
        "--params", type=Path, default=None,
        help="JSON parameter file; explicit options override its values",
    )
    for flag, _, kind, help_text in NUMERIC_OPTIONS:
        group.add_argument(flag, type=kind, default=None, help=help_text)

    group.add_argument(
        "--shape", type=str.lower, default=None,
        choices=[name.lower() for name in SHAPE_NAMES],
        help="Waveform shape (sets --waveform)",
    )
    group.add_argument("--color-mode", choices=COLOR_MODES, default=None, help="Hue selection mode")
    group.add_argument(
        "--theme", choices=sorted(THEME_HUES) + ["auto"], default=None,
        help="Display theme for theme mode (default 'auto': picked by --hue)",
    )
    group.add_argument("--text", type=str, default=None, help="Trace this text instead of the oscillator")
    group.add_argument("--power-off", action="store_true", help="Show the flat powered-off trace")


def params_from_args(args: argparse.Namespace) -> ParameterSet:
    """
    Build a snapshot from parsed options.

    Raises:
        FileNotFoundError, ValueError: From loading ``--params``.
    """
    params = load_params(args.params) if args.params else ParameterSet()

    changes: Dict[str, Any] = {}
    for _, field, _, _ in NUMERIC_OPTIONS:
        value = getattr(args, field)
        if value is not None:
            changes[field] = value

    if args.shape is not None:
        changes["waveform"] = [name.lower() for name in SHAPE_NAMES].index(args.shape) * 0.25
    if args.color_mode is not None:
        changes["color_mode"] = args.color_mode
    if args.theme is not None:
        changes["theme"] = None if args.theme == "auto" else args.theme
    if args.text is not None:
        changes["text_input"] = args.text
        changes["text_mode"] = bool(args.text.strip())
    if args.power_off:
        changes["power_on"] = False

    return dataclasses.replace(params, **changes).clamped()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="radioscope",
        description="Render an animated retro oscilloscope waveform to MP4 or GIF",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=Path("radioscope.mp4"),
        help="Output path, .mp4 or .gif (default: radioscope.mp4)",
    )

    # Animation
    parser.add_argument("-d", "--duration", type=float, default=5.0, help="Seconds of animation (default: 5)")
    parser.add_argument("-f", "--fps", type=int, default=20, help="Frames per second (default: 20)")
    parser.add_argument("--width", type=int, default=800, help="Canvas width (default: 800)")
    parser.add_argument("--height", type=int, default=250, help="Canvas height (default: 250)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for glitch and noise")

    # Display
    parser.add_argument("--no-glow", action="store_true", help="Disable stroke glow")
    parser.add_argument("--no-scanlines", action="store_true", help="Disable scanlines")
    parser.add_argument("--no-graticule", action="store_true", help="Hide the grid")
    parser.add_argument("--no-vignette", action="store_true", help="Disable vignette")
    parser.add_argument("--persistence", type=float, default=0.0, help="Phosphor persistence (0-0.99)")
    parser.add_argument("--bloom", type=float, default=0.0, help="Full-frame bloom intensity (0-1)")
    parser.add_argument(
        "-q", "--quality", type=str, default="medium",
        choices=list(QUALITY_PRESETS),
        help="MP4 encoding quality (default: medium)",
    )

    parser.add_argument("--save-params", type=Path, default=None, help="Also write the final parameters as JSON")

    add_param_arguments(parser)
    return parser


def display_config_from_args(args: argparse.Namespace) -> DisplayConfig:
    return DisplayConfig(
        width=args.width,
        height=args.height,
        glow_enabled=not args.no_glow,
        graticule=not args.no_graticule,
        scanline_strength=0.0 if args.no_scanlines else 0.12,
        vignette_strength=0.0 if args.no_vignette else 0.3,
        phosphor_persistence=args.persistence,
        bloom_intensity=args.bloom,
    )


def main(argv: Optional[Sequence[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width < 32 or args.height < 16:
        print("Error: canvas must be at least 32x16 pixels", file=sys.stderr)
        sys.exit(1)

    try:
        params = params_from_args(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.save_params:
        save_params(params, args.save_params)
        print(f"Saved parameters: {args.save_params}")

    fps = max(1, args.fps)
    total_frames = max(1, int(round(args.duration * fps)))

    mode = f"TEXT \"{params.text_input}\"" if params.text_mode else f"{params.waveform_name} x{params.wave_count}"
    print(f"Rendering {total_frames} frames at {args.width}x{args.height} @ {fps}fps")
    print(f"  Mode: {mode}, Color: {params.color_mode}")

    simulator = WaveSimulator(
        params,
        SimulatorConfig(width=args.width, height=args.height, fps=fps),
        seed=args.seed,
    )
    renderer = FrameRenderer(display_config_from_args(args))
    frames = simulator.render_frames(total_frames, renderer)

    t0 = time.time()
    try:
        output = write_animation(
            frames,
            args.output,
            width=args.width,
            height=args.height,
            fps=fps,
            quality=args.quality,
            total_frames=total_frames,
            progress_callback=_progress_bar,
        )
    except FileNotFoundError:
        print("Error: ffmpeg not found on PATH (use a .gif output instead)", file=sys.stderr)
        sys.exit(1)
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    elapsed = time.time() - t0
    size_kb = output.stat().st_size / 1024
    print(f"\nDone! {size_kb:.1f} KB in {elapsed:.1f}s ({total_frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {output}")


if __name__ == "__main__":
    main()
