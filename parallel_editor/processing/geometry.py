"""
Whole-buffer geometric operations.

These run on a single thread; each returns a new buffer and leaves its
input untouched.
"""

import numpy as np

from ..core import FlipAxis, NullImageError, PixelBuffer, ResizeAlgorithm
from .resize import resize_buffer

DEFAULT_RESIZE_WIDTH = 200
DEFAULT_RESIZE_HEIGHT = 200


def _require(buffer: PixelBuffer) -> PixelBuffer:
    if buffer is None:
        raise NullImageError()
    return buffer


def flip_horizontal(buffer: PixelBuffer) -> PixelBuffer:
    """Mirror left to right."""
    return PixelBuffer.from_array(_require(buffer).pixels[:, ::-1])


def flip_vertical(buffer: PixelBuffer) -> PixelBuffer:
    """Mirror top to bottom."""
    return PixelBuffer.from_array(_require(buffer).pixels[::-1])


def flip(buffer: PixelBuffer, axis) -> PixelBuffer:
    """Flip across ``axis`` (FlipAxis or "horizontal"/"vertical")."""
    if FlipAxis.parse(axis) is FlipAxis.HORIZONTAL:
        return flip_horizontal(buffer)
    return flip_vertical(buffer)


def rotate_90(buffer: PixelBuffer) -> PixelBuffer:
    """Rotate 90 degrees clockwise; width and height swap."""
    return PixelBuffer.from_array(np.rot90(_require(buffer).pixels, k=-1))


def resize(
    buffer: PixelBuffer,
    width: int = DEFAULT_RESIZE_WIDTH,
    height: int = DEFAULT_RESIZE_HEIGHT,
    algorithm: ResizeAlgorithm = ResizeAlgorithm.LINEAR,
) -> PixelBuffer:
    """Resize to width x height (200x200 unless told otherwise)."""
    return resize_buffer(_require(buffer), width, height, algorithm)
