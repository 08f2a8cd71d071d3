"""Resize utilities: explicit resizing and aspect-preserving display scaling."""

from typing import Optional, Tuple

from ..core import NullImageError, PixelBuffer, ResizeAlgorithm
from ..oiio import OiioAdapter


def fit_within(width: int, height: int, box_width: int, box_height: int) -> Tuple[int, int]:
    """
    Calculate dimensions that fit width x height inside a box.

    The longer edge relative to the box is fitted exactly and the other is
    scaled to keep the aspect ratio (truncated, never below one pixel).

    Returns:
        (width, height) tuple
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Cannot fit an empty {width}x{height} image")
    if box_width <= 0 or box_height <= 0:
        raise ValueError(f"Target box must be positive, got {box_width}x{box_height}")

    if width / box_width > height / box_height:
        new_width = box_width
        new_height = int(height / width * new_width)
    else:
        new_height = box_height
        new_width = int(width / height * new_height)

    return max(1, new_width), max(1, new_height)


def get_filter_name(algorithm: ResizeAlgorithm) -> Optional[str]:
    """Map ResizeAlgorithm to an OIIO resize filter name (None = plain resample)."""
    algo_map = {
        ResizeAlgorithm.CUBIC: "cubic",
        ResizeAlgorithm.LANCZOS3: "lanczos3",
    }
    return algo_map.get(algorithm)


def resize_buffer(
    buffer: PixelBuffer,
    width: int,
    height: int,
    algorithm: ResizeAlgorithm = ResizeAlgorithm.LINEAR,
) -> PixelBuffer:
    """Resample ``buffer`` to exactly width x height."""
    if buffer is None:
        raise NullImageError("Cannot resize without an image")
    if width <= 0 or height <= 0:
        raise ValueError(f"Target size must be positive, got {width}x{height}")
    if buffer.size == 0:
        raise ValueError("Cannot resize an empty image")

    if (width, height) == (buffer.width, buffer.height):
        return buffer.clone()

    return OiioAdapter.resample(
        buffer,
        width,
        height,
        filter_name=get_filter_name(algorithm),
        interpolate=algorithm is not ResizeAlgorithm.NEAREST,
    )


def scale_to_fit(buffer: PixelBuffer, box_width: int, box_height: int) -> PixelBuffer:
    """
    Scale ``buffer`` for on-screen display inside a box.

    Presentation only: the result is a new buffer and is never meant to be
    recorded in the edit history.
    """
    if buffer is None:
        raise NullImageError("Cannot scale without an image")
    width, height = fit_within(buffer.width, buffer.height, box_width, box_height)
    return resize_buffer(buffer, width, height, ResizeAlgorithm.CUBIC)
