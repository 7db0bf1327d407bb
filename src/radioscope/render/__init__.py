"""Raster display, post-processing and encoders."""

from radioscope.render.raster import DisplayConfig, FrameRenderer

__all__ = ["DisplayConfig", "FrameRenderer"]
