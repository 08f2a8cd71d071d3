"""
Request/response API of the editing engine.

Every function takes the image it works on and returns a new one; nothing
here keeps a reference to a "current" image.
"""

from typing import Optional

from .core import FlipAxis, HistoryStack, PixelBuffer, ResizeAlgorithm
from .oiio import OiioAdapter
from .oiio.adapter import DEFAULT_JPEG_QUALITY
from .processing import geometry
from .processing.executor import apply_filter
from .processing.resize import scale_to_fit


def record(history: HistoryStack, buffer: PixelBuffer) -> None:
    """Record a confirmed edit."""
    history.record(buffer)


def revert(history: HistoryStack) -> Optional[PixelBuffer]:
    """Revert using the history's counted policy; None when it is a no-op."""
    return history.revert()


def flip(buffer: PixelBuffer, axis) -> PixelBuffer:
    return geometry.flip(buffer, FlipAxis.parse(axis))


def rotate90(buffer: PixelBuffer) -> PixelBuffer:
    return geometry.rotate_90(buffer)


def resize(
    buffer: PixelBuffer,
    width: int,
    height: int,
    algorithm: ResizeAlgorithm = ResizeAlgorithm.LINEAR,
) -> PixelBuffer:
    return geometry.resize(buffer, width, height, algorithm)


def decode(data: bytes, format_hint) -> PixelBuffer:
    """Raw file bytes + format hint (jpg|jpeg|png|bmp) -> PixelBuffer."""
    return OiioAdapter.decode(data, format_hint)


def encode(buffer: PixelBuffer, format_hint, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """PixelBuffer -> raw file bytes of the target format."""
    return OiioAdapter.encode(buffer, format_hint, jpeg_quality=jpeg_quality)


__all__ = [
    "apply_filter",
    "record",
    "revert",
    "flip",
    "rotate90",
    "resize",
    "decode",
    "encode",
    "scale_to_fit",
]
