"""
Frame sequence writers.

MP4 frames are piped raw to ffmpeg over stdin, with no intermediate
files and no audio stream. GIFs are assembled with Pillow.
"""

import subprocess
from pathlib import Path
from typing import Callable, Iterator, Optional

import numpy as np
from PIL import Image


# Quality presets: (preset, crf, pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}

SUPPORTED_SUFFIXES = (".mp4", ".gif")


def ffmpeg_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "medium",
) -> list[str]:
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["medium"])
    return [
        "ffmpeg", "-y",
        # Raw video from pipe
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", pix_fmt,
        # Even dimensions for yuv420p
        "-vf", "pad=ceil(iw/2)*2:ceil(ih/2)*2",
        str(output_path),
    ]


def encode_video(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    width: int = 800,
    height: int = 250,
    fps: int = 20,
    quality: str = "medium",
    total_frames: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Path:
    """
    Encode frames to an H.264 MP4.

    Args:
        frame_iterator: Yields (H, W, 3) uint8 numpy arrays.
        output_path: Output MP4 path.
        width: Frame width.
        height: Frame height.
        fps: Frames per second.
        quality: "high", "medium", or "fast".
        total_frames: Total frame count for progress reporting.
        progress_callback: Optional callback(current_frame, total_frames).

    Returns:
        Path to the output file.

    Raises:
        RuntimeError: If ffmpeg exits with a non-zero status.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    proc = subprocess.Popen(
        ffmpeg_command(output_path, width, height, fps, quality),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    frame_count = 0
    try:
        for frame in frame_iterator:
            proc.stdin.write(np.ascontiguousarray(frame, dtype=np.uint8).tobytes())
            frame_count += 1
            if progress_callback and total_frames:
                progress_callback(frame_count, total_frames)
    except BrokenPipeError:
        # ffmpeg died early; its stderr is reported below
        pass
    finally:
        if proc.stdin:
            proc.stdin.close()

    proc.wait()

    if proc.returncode != 0:
        stderr = proc.stderr.read().decode("utf-8", errors="replace")
        error_lines = [
            line for line in stderr.split("\n")
            if "error" in line.lower() or "invalid" in line.lower()
        ]
        error_msg = "\n".join(error_lines[-5:]) if error_lines else stderr[-500:]
        raise RuntimeError(
            f"ffmpeg exited with code {proc.returncode}: {error_msg}"
        )

    return output_path


def save_gif(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    fps: int = 20,
    total_frames: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Path:
    """
    Write frames to a looping animated GIF.

    Raises:
        ValueError: If the iterator yields no frames.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    images = []
    for frame in frame_iterator:
        images.append(Image.fromarray(np.asarray(frame, dtype=np.uint8)))
        if progress_callback and total_frames:
            progress_callback(len(images), total_frames)

    if not images:
        raise ValueError("No frames to write")

    images[0].save(
        output_path,
        save_all=True,
        append_images=images[1:],
        duration=int(round(1000 / max(fps, 1))),
        loop=0,
    )
    return output_path


def write_animation(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "medium",
    total_frames: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Path:
    """Dispatch on the output suffix (.mp4 or .gif)."""
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix == ".gif":
        return save_gif(frame_iterator, output_path, fps, total_frames, progress_callback)
    if suffix == ".mp4":
        return encode_video(
            frame_iterator,
            output_path,
            width=width,
            height=height,
            fps=fps,
            quality=quality,
            total_frames=total_frames,
            progress_callback=progress_callback,
        )
    raise ValueError(
        f"Unsupported output format '{output_path.suffix}', expected one of {', '.join(SUPPORTED_SUFFIXES)}"
    )
