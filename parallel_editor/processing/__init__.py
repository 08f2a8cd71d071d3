"""
Processing system for the image editor.

Provides the filter catalog, the parallel executor that applies one filter
to a whole image, and single-threaded geometric operations.
"""

from .filters import (
    FilterDescriptor,
    FILTER_REGISTRY,
    average_intensity,
    get_filter,
    resolve_filter,
    list_filters,
    get_filters_by_category,
    get_all_categories,
)
from .executor import (
    ParallelFilterExecutor,
    ChunkProgress,
    apply_filter,
    calculate_optimal_workers,
    partition_rows,
)
from .geometry import flip, flip_horizontal, flip_vertical, rotate_90, resize
from .resize import fit_within, resize_buffer, scale_to_fit

__all__ = [
    "FilterDescriptor",
    "FILTER_REGISTRY",
    "ParallelFilterExecutor",
    "ChunkProgress",
    # Helpers
    "average_intensity",
    "get_filter",
    "resolve_filter",
    "list_filters",
    "get_filters_by_category",
    "get_all_categories",
    "apply_filter",
    "calculate_optimal_workers",
    "partition_rows",
    # Geometry
    "flip",
    "flip_horizontal",
    "flip_vertical",
    "rotate_90",
    "resize",
    "fit_within",
    "resize_buffer",
    "scale_to_fit",
]
