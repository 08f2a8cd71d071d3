"""
Filter definitions for the image editor.

Each filter is a pure color mapping applied independently to every pixel.
Kernels are vectorized over numpy arrays of shape (..., 3) so the same code
serves a single Color, one row band of an image, or a whole image. Contrast
filters additionally depend on the average intensity of the source image,
which the executor computes once before any pixel is mapped.

All arithmetic follows integer channel rules: fractional results are
truncated toward zero, then clamped to [0, 255].
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, List, Optional

import numpy as np

from ..core import Color, UnknownFilterError, as_color

Kernel = Callable[[np.ndarray, Optional[float]], np.ndarray]
Statistic = Callable[[np.ndarray], float]

BRIGHTNESS_DELTA = 5
HIGH_FACTOR = 1.1
LOW_FACTOR = 0.9
GREEN_BOOST = 1.5
COLOR_CORRECTION_OFFSETS = (20, 10, 5)


@dataclass(frozen=True)
class FilterDescriptor:
    """A named, stateless pixel mapping."""
    filter_id: str
    name: str
    category: str
    kernel: Kernel = field(repr=False, compare=False)
    statistic: Optional[Statistic] = field(default=None, repr=False, compare=False)
    description: str = ""

    @property
    def needs_statistic(self) -> bool:
        return self.statistic is not None

    def compute_statistic(self, pixels: np.ndarray) -> Optional[float]:
        """Whole-image statistic for this filter, or None if it needs none."""
        if self.statistic is None:
            return None
        return self.statistic(pixels)

    def map_pixels(self, pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
        """Map an (..., 3) uint8 array to a new uint8 array of the same shape."""
        if self.needs_statistic and statistic is None:
            raise ValueError(f"Filter {self.filter_id!r} requires a precomputed statistic")
        return self.kernel(pixels, statistic)

    def map_color(self, color: Color, statistic: Optional[float] = None) -> Color:
        """Map a single (r, g, b) color."""
        pixel = np.array([as_color(color)], dtype=np.uint8)
        r, g, b = self.map_pixels(pixel, statistic)[0]
        return int(r), int(g), int(b)


# ============================================================================
# KERNEL HELPERS
# ============================================================================

def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(values, 0, 255).astype(np.uint8)


def _gray(values: np.ndarray) -> np.ndarray:
    """Broadcast one value per pixel to all three channels."""
    return np.repeat(_to_uint8(values)[..., np.newaxis], 3, axis=-1)


def average_intensity(pixels: np.ndarray) -> float:
    """
    Mean over all pixels of (R + G + B) / 3.

    The channel total is summed exactly in integers and divided once, so the
    result does not depend on summation order. An empty image averages 0.0.
    A per-pixel float sum of (R + G + B) / 3.0 can differ in the last bit,
    so a few contrast outputs may land one step apart from such a sum.
    """
    count = pixels.shape[0] * pixels.shape[1] if pixels.ndim == 3 else pixels.size // 3
    if count == 0:
        return 0.0
    total = int(pixels.sum(dtype=np.int64))
    return total / (3.0 * count)


# ============================================================================
# FILTER KERNELS
# ============================================================================

def invert(pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
    """(255 - R, 255 - G, 255 - B)"""
    return (255 - pixels.astype(np.int16)).astype(np.uint8)


def black_and_white(pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
    """Integer channel average."""
    return _gray(pixels.astype(np.int32).sum(axis=-1) // 3)


def sepia(pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
    """Classic sepia tone matrix."""
    f = pixels.astype(np.float64)
    r, g, b = f[..., 0], f[..., 1], f[..., 2]
    out = np.stack(
        (
            r * 0.393 + g * 0.769 + b * 0.189,
            r * 0.349 + g * 0.686 + b * 0.168,
            r * 0.272 + g * 0.534 + b * 0.131,
        ),
        axis=-1,
    )
    return _to_uint8(np.trunc(out))


def green_boost(pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
    """Scale the green channel by 1.5."""
    out = pixels.astype(np.float64)
    out[..., 1] = np.trunc(out[..., 1] * GREEN_BOOST)
    return _to_uint8(out)


def blue_dim(pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
    """Halve red and green so blue dominates."""
    out = pixels.copy()
    out[..., :2] //= 2
    return out


def shift_brightness(pixels: np.ndarray, statistic: Optional[float] = None, delta: int = 0) -> np.ndarray:
    """Add a constant to every channel."""
    return _to_uint8(pixels.astype(np.int16) + delta)


def scale_contrast(pixels: np.ndarray, statistic: Optional[float] = None, factor: float = 1.0) -> np.ndarray:
    """Stretch channels away from (or towards) the image's average intensity."""
    f = pixels.astype(np.float64)
    return _to_uint8(np.trunc((f - statistic) * factor + statistic))


def scale_grayscale(pixels: np.ndarray, statistic: Optional[float] = None, factor: float = 1.0) -> np.ndarray:
    """Luma weighted gray, then scaled."""
    f = pixels.astype(np.float64)
    luma = np.trunc(0.3 * f[..., 0] + 0.59 * f[..., 1] + 0.11 * f[..., 2])
    return _gray(np.trunc(luma * factor))


def color_correction(pixels: np.ndarray, statistic: Optional[float] = None) -> np.ndarray:
    """Fixed warm offsets: R+20, G+10, B+5."""
    offsets = np.array(COLOR_CORRECTION_OFFSETS, dtype=np.int16)
    return _to_uint8(pixels.astype(np.int16) + offsets)


# ============================================================================
# REGISTRY
# ============================================================================

_FILTERS = [
    FilterDescriptor(
        filter_id="invert",
        name="Invert",
        category="Color Transforms",
        kernel=invert,
        description="Replace every channel with its complement",
    ),
    FilterDescriptor(
        filter_id="black_and_white",
        name="Black & White",
        category="Color Transforms",
        kernel=black_and_white,
        description="Average the three channels",
    ),
    FilterDescriptor(
        filter_id="sepia",
        name="Sepia",
        category="Color Transforms",
        kernel=sepia,
        description="Warm brown vintage tone",
    ),
    FilterDescriptor(
        filter_id="grayscale_high",
        name="Grayscale (High)",
        category="Color Transforms",
        kernel=partial(scale_grayscale, factor=HIGH_FACTOR),
        description="Luma grayscale brightened by 10%",
    ),
    FilterDescriptor(
        filter_id="grayscale_low",
        name="Grayscale (Low)",
        category="Color Transforms",
        kernel=partial(scale_grayscale, factor=LOW_FACTOR),
        description="Luma grayscale darkened by 10%",
    ),
    FilterDescriptor(
        filter_id="brightness_high",
        name="Brightness +",
        category="Tone & Dynamics",
        kernel=partial(shift_brightness, delta=BRIGHTNESS_DELTA),
        description="Add 5 to every channel",
    ),
    FilterDescriptor(
        filter_id="brightness_low",
        name="Brightness -",
        category="Tone & Dynamics",
        kernel=partial(shift_brightness, delta=-BRIGHTNESS_DELTA),
        description="Subtract 5 from every channel",
    ),
    FilterDescriptor(
        filter_id="contrast_high",
        name="Contrast +",
        category="Tone & Dynamics",
        kernel=partial(scale_contrast, factor=HIGH_FACTOR),
        statistic=average_intensity,
        description="Push channels 10% away from the average intensity",
    ),
    FilterDescriptor(
        filter_id="contrast_low",
        name="Contrast -",
        category="Tone & Dynamics",
        kernel=partial(scale_contrast, factor=LOW_FACTOR),
        statistic=average_intensity,
        description="Pull channels 10% towards the average intensity",
    ),
    FilterDescriptor(
        filter_id="green_boost",
        name="Green Boost",
        category="Channel Operations",
        kernel=green_boost,
        description="Multiply the green channel by 1.5",
    ),
    FilterDescriptor(
        filter_id="blue_dim",
        name="Blue Filter",
        category="Channel Operations",
        kernel=blue_dim,
        description="Halve red and green",
    ),
    FilterDescriptor(
        filter_id="color_correction",
        name="Color Correction",
        category="Channel Operations",
        kernel=color_correction,
        description="Add fixed offsets R+20, G+10, B+5",
    ),
]

# Registry of all available filters
FILTER_REGISTRY: Dict[str, FilterDescriptor] = {f.filter_id: f for f in _FILTERS}


def get_filter(filter_id: str) -> FilterDescriptor:
    """Look up a filter by id. Raises UnknownFilterError if not registered."""
    try:
        return FILTER_REGISTRY[filter_id]
    except KeyError:
        raise UnknownFilterError(filter_id) from None


def resolve_filter(filter) -> FilterDescriptor:
    """Accept either a FilterDescriptor or a registered filter id."""
    if isinstance(filter, FilterDescriptor):
        return filter
    return get_filter(filter)


def list_filters() -> List[FilterDescriptor]:
    """All filters in registration order."""
    return list(FILTER_REGISTRY.values())


def get_filters_by_category(category: str) -> List[FilterDescriptor]:
    """Get all filters in a specific category."""
    return [f for f in FILTER_REGISTRY.values() if f.category == category]


def get_all_categories() -> List[str]:
    """Get all filter categories in order."""
    categories = []
    for f in FILTER_REGISTRY.values():
        if f.category not in categories:
            categories.append(f.category)

    preferred_order = [
        "Color Transforms",
        "Tone & Dynamics",
        "Channel Operations",
    ]

    # Return in preferred order, then any others
    result = [cat for cat in preferred_order if cat in categories]
    result.extend(cat for cat in categories if cat not in result)
    return result
