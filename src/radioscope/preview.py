"""
Live preview window.

Usage:
    radioscope-preview [waveform options]

Keys: SPACE power, T text mode, W next waveform, ESC quit.
"""

import argparse
import sys
from typing import Optional, Sequence

import numpy as np
import pygame

from radioscope.cli import add_param_arguments, params_from_args
from radioscope.core.params import ParameterSet
from radioscope.render.raster import DisplayConfig, FrameRenderer
from radioscope.simulator import SimulatorConfig, WaveSimulator


def frame_to_surface(frame: np.ndarray) -> pygame.Surface:
    """Convert an (H, W, 3) frame to a pygame Surface."""
    # pygame indexes surfaces as (width, height)
    return pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))


def next_waveform(params: ParameterSet) -> float:
    return ((params.shape_index + 1) % 4) * 0.25


def handle_key(simulator: WaveSimulator, key: int) -> bool:
    """Apply one key press. Returns False when the preview should close."""
    p = simulator.params
    if key == pygame.K_ESCAPE:
        return False
    if key == pygame.K_SPACE:
        simulator.update(power_on=not p.power_on)
    elif key == pygame.K_t:
        simulator.update(text_mode=not p.text_mode)
    elif key == pygame.K_w:
        simulator.update(waveform=next_waveform(p))
    return True


def run_preview(
    params: ParameterSet,
    config: Optional[SimulatorConfig] = None,
    display: Optional[DisplayConfig] = None,
    seed: Optional[int] = None,
    max_frames: Optional[int] = None,
):
    """
    Open a window and animate until closed.

    Args:
        params: Initial parameter snapshot.
        config: Canvas size and clock settings.
        display: Raster display settings; sized from ``config`` if None.
        seed: Seed for glitch and noise.
        max_frames: Stop after this many frames (None runs until closed).
    """
    cfg = config or SimulatorConfig()
    simulator = WaveSimulator(params, cfg, seed=seed)
    renderer = FrameRenderer(display or DisplayConfig(width=cfg.width, height=cfg.height))

    pygame.init()
    try:
        screen = pygame.display.set_mode((cfg.width, cfg.height))
        pygame.display.set_caption("Radioscope")
        clock = pygame.time.Clock()

        running = True
        frame_count = 0
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = handle_key(simulator, event.key) and running

            frame = renderer.render(simulator.layers())
            screen.blit(frame_to_surface(frame), (0, 0))
            caption = "OFF" if not simulator.params.power_on else simulator.params.waveform_name
            pygame.display.set_caption(f"Radioscope - {caption}")
            pygame.display.flip()

            simulator.advance()
            frame_count += 1
            if max_frames is not None and frame_count >= max_frames:
                running = False
            clock.tick(cfg.fps)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        prog="radioscope-preview",
        description="Live retro oscilloscope waveform preview",
    )
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=250, help="Window height (default: 250)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for glitch and noise")
    add_param_arguments(parser)
    args = parser.parse_args(argv)

    try:
        params = params_from_args(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    run_preview(params, SimulatorConfig(width=args.width, height=args.height), seed=args.seed)


if __name__ == "__main__":
    main()
