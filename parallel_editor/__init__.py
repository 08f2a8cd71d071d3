"""
Parallel Image Editor: in-memory pixel filters with undo history.
"""

from .core import (
    Color,
    FlipAxis,
    HistoryStack,
    ImageFormat,
    PixelBuffer,
    ResizeAlgorithm,
    EditorError,
)
from .processing import ParallelFilterExecutor, get_filter, list_filters
from .services import EditSession, Settings

__version__ = "1.0.0"

__all__ = [
    "Color",
    "FlipAxis",
    "HistoryStack",
    "ImageFormat",
    "PixelBuffer",
    "ResizeAlgorithm",
    "EditorError",
    "ParallelFilterExecutor",
    "get_filter",
    "list_filters",
    "EditSession",
    "Settings",
    "__version__",
]
