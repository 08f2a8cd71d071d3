"""Core data types, errors and edit history."""
from .errors import (
    EditorError,
    NullImageError,
    OutOfBoundsError,
    UnsupportedFormatError,
    HistoryUnderflowError,
    UnknownFilterError,
    FilterCancelledError,
    CodecError,
)
from .types import (
    Color,
    FlipAxis,
    ImageFormat,
    PixelBuffer,
    ResizeAlgorithm,
    as_color,
)
from .history import HistoryStack

__all__ = [
    "Color",
    "FlipAxis",
    "ImageFormat",
    "PixelBuffer",
    "ResizeAlgorithm",
    "as_color",
    "HistoryStack",
    # Errors
    "EditorError",
    "NullImageError",
    "OutOfBoundsError",
    "UnsupportedFormatError",
    "HistoryUnderflowError",
    "UnknownFilterError",
    "FilterCancelledError",
    "CodecError",
]
